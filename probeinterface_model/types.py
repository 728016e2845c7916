"""Type definitions for the probeinterface model."""

from __future__ import annotations

from dataclasses import dataclass
from enum import Enum, IntEnum


class ContactShape(str, Enum):
    """Outline of a single contact, as written in the "contact_shapes" array."""

    CIRCLE = "circle"
    RECT = "rect"
    SQUARE = "square"

    @classmethod
    def from_value(cls, value) -> ContactShape:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown contact shape: {value}") from None


class ProbeSiUnits(str, Enum):
    """Unit of every coordinate stored in a probe."""

    MM = "mm"
    UM = "um"

    @classmethod
    def from_value(cls, value) -> ProbeSiUnits:
        try:
            return cls(value)
        except ValueError:
            raise ValueError(f"Unknown SI units: {value}") from None


class ProbeNdim(IntEnum):
    """Number of spatial dimensions of a probe.

    Written to JSON as the literal strings "2" / "3"; both the string
    and the integer form are accepted when reading.
    """

    TWO = 2
    THREE = 3

    @classmethod
    def from_value(cls, value) -> ProbeNdim:
        # int() would truncate 2.7 to 2
        if isinstance(value, bool) or (isinstance(value, float) and not value.is_integer()):
            raise ValueError(f"Unknown number of dimensions: {value}")
        try:
            return cls(int(value))
        except (TypeError, ValueError):
            raise ValueError(f"Unknown number of dimensions: {value}") from None

    def to_json(self) -> str:
        return str(self.value)


# Note: frozen attributes (@dataclass(frozen=True)) allows hashability
# and lets a single record be shared by every contact of a probe
@dataclass(frozen=True)
class ContactShapeParam:
    """Size of one contact. Which fields matter depends on its ContactShape:
    circle -> radius, square -> width, rect -> width and height."""

    radius: float | None = None
    width: float | None = None
    height: float | None = None


@dataclass(frozen=True)
class ProbeAnnotations:
    """Probe level metadata."""

    name: str | None = None
    manufacturer: str | None = None


@dataclass(frozen=True)
class ContactAnnotations:
    """Free text attached to the contacts of a probe."""

    annotations: tuple[str, ...] | None = None


@dataclass(frozen=True)
class Contact:
    """One electrode contact, read from the parallel arrays of its probe.

    index is the position of the contact within its owning probe.
    """

    pos_x: float
    pos_y: float
    shape: ContactShape
    shape_params: ContactShapeParam
    device_id: int
    contact_id: str
    shank_id: str
    index: int
