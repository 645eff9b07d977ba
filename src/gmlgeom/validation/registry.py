from __future__ import annotations

from typing import Protocol, TYPE_CHECKING

if TYPE_CHECKING:
    from gmlgeom.validation.context import ElementContext
    from gmlgeom.validation.result import ValidationResult


class Validator(Protocol):
    """A check that appends its findings to a ValidationResult."""
    id: int

    def validate(self, context: ElementContext, result: ValidationResult) -> None: ...


_REGISTRY: dict[int, Validator] = {}


def register_validator(cls: type) -> type:
    """Class decorator to register a validator by its id."""
    validator_id = getattr(cls, "id", None)
    if validator_id is None:
        raise ValueError(f"{cls.__name__} must define id")
    if validator_id in _REGISTRY:
        raise ValueError(f"Validator id {validator_id} is already taken by {type(_REGISTRY[validator_id]).__name__}")
    _REGISTRY[validator_id] = cls()
    return cls


def get_validator(validator_id: int) -> Validator:
    validator = _REGISTRY.get(validator_id)
    if validator is None:
        raise KeyError(f"No validator registered for id {validator_id}")
    return validator


def list_ids() -> list[int]:
    return sorted(_REGISTRY)
