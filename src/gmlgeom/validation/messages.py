"""
Diagnostic Messages
Message keys and their English texts, plus coordinate formatting.
"""
from __future__ import annotations

from typing import Optional, Sequence

NOT_SIMPLE = "not.simple"
NOT_SIMPLE_INTERSECTION = "not.simple.intersection"
SURFACE_PATCHES_NOT_CONNECTED = "surfacepatchesnotconnected"
UNSUPPORTED_GEOMETRY_TYPE = "unsupportedgeometrytype"

MESSAGES: dict[str, str] = {
    NOT_SIMPLE: "The geometry is not simple.",
    NOT_SIMPLE_INTERSECTION: "The geometry is not simple, it intersects itself.",
    SURFACE_PATCHES_NOT_CONNECTED: "The polygon patches of the surface are not connected.",
    UNSUPPORTED_GEOMETRY_TYPE: "Geometry type '{0}' is not supported and was treated as connected.",
}


def format_value(value: float) -> str:
    """Format an ordinate with 3 to 10 decimals (pattern 0.000#######)."""
    whole, frac = f"{value:.10f}".split(".")
    return f"{whole}.{frac.rstrip('0').ljust(3, '0')}"


def problem_location(coordinate: Sequence[float]) -> str:
    """Render an offending coordinate, e.g. 'Location: (1.000, 2.500)'."""
    return f"Location: ({', '.join(format_value(v) for v in coordinate)})"


def format_message(key: str, *args: object, coordinate: Optional[Sequence[float]] = None) -> str:
    """
    Build the text for a message key.

    Args:
        key: One of the message keys defined in this module.
        *args: Positional values for the placeholders of the message.
        coordinate: Optional offending coordinate appended to the text.

    Raises:
        KeyError: If the key is unknown.
    """
    text = MESSAGES[key].format(*args)
    if coordinate is not None:
        text = f"{text} {problem_location(coordinate)}"
    return text
