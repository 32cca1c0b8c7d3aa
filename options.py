# options.py
"""
Validated, immutable configuration of a Pixelizer instance.

The options are built once, checked eagerly and then shared read-only by
every component of the engine. Keys from the original web configuration
(camelCase, including the historic ``threshhold`` spelling) are accepted
alongside the Python field names.
"""
import logging
import numbers
from dataclasses import dataclass, fields
from typing import Any, Dict, Mapping, Optional, Tuple

from constants import (
    DEFAULT_PIXEL_RADIUS, DEFAULT_AMOUNT, DEFAULT_THRESHOLD, DEFAULT_COLORS,
    DEFAULT_DISTRIBUTION, DEFAULT_FRICTION_VALUE, DEFAULT_AUTOSTOP,
    DEFAULT_SPEED
)

# --- Data Contracts ---
#
# class PixelizerOptions:
#   - Frozen dataclass, see the field list below.
#   - Invariants:
#     - 0 < threshold < 255
#     - colors is a non-empty tuple
#     - amount and autostop are positive ints, speed > 0, pixel_radius >= 0
#
# PixelizerOptions.from_dict(mapping: Mapping[str, Any]) -> PixelizerOptions:
#   - Inputs: option mapping with camelCase or snake_case keys.
#   - Outputs: a validated options instance.
#   - Side Effects: logs ignored keys at WARNING level.
#   - Raises: ValueError for out-of-domain numeric options.

_ALIASES = {
    "pixelRadius": "pixel_radius",
    "threshhold": "threshold",
    "verticalDistribution": "vertical_distribution",
    "horizontalDistribution": "horizontal_distribution",
    "frictionValue": "friction_value",
}


def normalize_threshold(value: Any) -> int:
    """
    Returns the threshold if it lies strictly between 0 and 255,
    otherwise the default of 150.
    """
    if isinstance(value, numbers.Real) and not isinstance(value, bool) and 0 < value < 255:
        return value
    logging.debug(f"Threshold {value!r} out of range (0, 255), using {DEFAULT_THRESHOLD}.")
    return DEFAULT_THRESHOLD


def _fail(msg: str) -> None:
    logging.critical(msg)
    raise ValueError(msg)


@dataclass(frozen=True)
class PixelizerOptions:
    pixel_radius: float = DEFAULT_PIXEL_RADIUS
    amount: int = DEFAULT_AMOUNT
    threshold: int = DEFAULT_THRESHOLD
    colors: Tuple[str, ...] = DEFAULT_COLORS
    vertical_distribution: float = DEFAULT_DISTRIBUTION
    horizontal_distribution: float = DEFAULT_DISTRIBUTION
    friction: bool = False
    friction_value: float = DEFAULT_FRICTION_VALUE
    autoinit: bool = True
    autostop: int = DEFAULT_AUTOSTOP
    speed: float = DEFAULT_SPEED
    seed: Optional[int] = None

    def __post_init__(self):
        # Rule 7: Enforce data contracts. Validate config on initialization.
        # The dataclass is frozen, so normalized values go through object.__setattr__.
        object.__setattr__(self, "threshold", normalize_threshold(self.threshold))

        colors = tuple(self.colors) if self.colors is not None else ()
        if not colors:
            logging.warning(f"No colors configured. Falling back to {DEFAULT_COLORS}.")
            colors = DEFAULT_COLORS
        object.__setattr__(self, "colors", colors)

        if self.pixel_radius < 0:
            _fail(f"Configuration error: pixel_radius must be >= 0, got {self.pixel_radius}.")
        if isinstance(self.amount, bool) or not isinstance(self.amount, numbers.Integral) or self.amount <= 0:
            _fail(f"Configuration error: amount must be a positive integer, got {self.amount!r}.")
        if isinstance(self.autostop, bool) or not isinstance(self.autostop, numbers.Integral) or self.autostop <= 0:
            _fail(f"Configuration error: autostop must be a positive integer, got {self.autostop!r}.")
        if self.speed <= 0:
            _fail(f"Configuration error: speed must be > 0, got {self.speed}.")

    @classmethod
    def from_dict(cls, mapping: Optional[Mapping[str, Any]] = None) -> "PixelizerOptions":
        """
        Builds options from a configuration mapping.

        Args:
            mapping (Mapping[str, Any]): Options as found in config.json. Both
                the original camelCase keys and the field names are accepted.

        Returns:
            PixelizerOptions: The validated options.
        """
        known = {f.name for f in fields(cls)}
        kwargs: Dict[str, Any] = {}
        for key, value in (mapping or {}).items():
            name = _ALIASES.get(key, key)
            if name not in known:
                logging.warning(f"Ignoring unknown pixelizer option '{key}'.")
                continue
            kwargs[name] = value
        return cls(**kwargs)
