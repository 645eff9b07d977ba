from __future__ import annotations

import logging
from typing import Iterable, Optional, TYPE_CHECKING

from gmlgeom.validation.registry import get_validator, list_ids

if TYPE_CHECKING:
    from gmlgeom.validation.context import ElementContext
    from gmlgeom.validation.result import ValidationResult

logger = logging.getLogger(__name__)


def validate(
    context: ElementContext,
    result: ValidationResult,
    validator_ids: Optional[Iterable[int]] = None
) -> ValidationResult:
    """
    Run validators on one element in ascending id order.

    Args:
        context: The element under validation.
        result: Sink shared by all validators of this call.
        validator_ids: Ids to run; all registered validators if None.

    Raises:
        KeyError: If an id has no registered validator.

    Returns:
        The same result object, for chaining.
    """
    ids = list_ids() if validator_ids is None else sorted(set(validator_ids))
    for validator_id in ids:
        validator = get_validator(validator_id)
        logger.debug(f"Running {type(validator).__name__} on element '{context.element_id}'.")
        validator.validate(context, result)
    return result
