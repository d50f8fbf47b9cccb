from __future__ import annotations

from dataclasses import dataclass
from enum import Enum

"""Process type / column layout models.

A process type names one document layout (sea-rail with or without images,
air freight). Each layout places the weight and box-count values in different
columns; ProcessConfig carries those 1-based column indices into the engine.
"""

__all__ = [
    "MAX_COLUMN",
    "ProcessConfig",
    "ProcessType",
]

# Last column of an .xlsx sheet (XFD)
MAX_COLUMN = 16384


class ProcessType(Enum):
    """Known document layouts, keyed by their persisted identifier."""
    SEA_RAIL_WITH_IMAGE = "sea-rail-with-image"
    SEA_RAIL_NO_IMAGE = "sea-rail-no-image"
    AIR_FREIGHT = "air-freight"

    @classmethod
    def parse(cls, value: str | ProcessType) -> ProcessType:
        """Return the member for an identifier, raising ValueError if unknown."""
        if isinstance(value, ProcessType):
            return value
        try:
            return cls(value.strip().lower())
        except ValueError:
            known = ", ".join(m.value for m in cls)
            raise ValueError(f"unknown process type: {value!r} (expected one of: {known})") from None


@dataclass(frozen=True)
class ProcessConfig:
    """Column layout for one process type.

    weight_column / box_column are 1-based spreadsheet columns (A=1).
    The quantity column used as the split basis is the column directly left
    of the weight column.

    copy_images is persisted for compatibility with saved settings but has no
    effect: embedded images are not copied.
    """
    process_type: ProcessType
    weight_column: int
    box_column: int
    copy_images: bool = False

    @property
    def quantity_column(self) -> int:
        return self.weight_column - 1

    @classmethod
    def default_for_type(cls, process_type: ProcessType | str) -> ProcessConfig:
        ptype = ProcessType.parse(process_type)
        weight, box, images = _DEFAULTS[ptype]
        return cls(process_type=ptype, weight_column=weight, box_column=box, copy_images=images)

    def validation_errors(self) -> list[str]:
        """Return human readable problems with the column layout (empty if valid)."""
        errors: list[str] = []
        for name in ("weight_column", "box_column"):
            value = getattr(self, name)
            # bool is an int subclass; reject it explicitly
            if isinstance(value, bool) or not isinstance(value, int):
                errors.append(f"{name} must be an integer, got {value!r}")
            elif not 1 <= value <= MAX_COLUMN:
                errors.append(f"{name} must be between 1 and {MAX_COLUMN}, got {value}")
        if errors:
            return errors
        if self.weight_column < 2:
            errors.append("weight_column must be >= 2 (quantity column is weight_column - 1)")
        if self.weight_column == self.box_column:
            errors.append("weight_column and box_column must differ")
        return errors

    def to_mapping(self) -> dict[str, object]:
        return {
            "weight_column": self.weight_column,
            "box_column": self.box_column,
            "copy_images": self.copy_images,
        }


# (weight_column, box_column, copy_images)
_DEFAULTS: dict[ProcessType, tuple[int, int, bool]] = {
    ProcessType.SEA_RAIL_WITH_IMAGE: (13, 11, True),
    ProcessType.SEA_RAIL_NO_IMAGE: (13, 11, False),
    ProcessType.AIR_FREIGHT: (15, 13, True),
}
