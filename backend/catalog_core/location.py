"""Location entity and conversion from stored documents."""
import math
from dataclasses import asdict, dataclass
from typing import Any, Mapping

# Writable fields, in form order. `id` is never part of a write payload.
LOCATION_FIELDS = ("name", "description", "image_url", "order", "x", "y")

# Substituted for missing or malformed values when reading documents.
DEFAULT_NAME = "Unnamed"
DEFAULT_DESCRIPTION = "No description"


@dataclass(frozen=True)
class Location:
    """A place of the catalog with display metadata and normalized map coordinates."""

    id: str
    name: str
    description: str
    image_url: str
    order: int
    x: float
    y: float

    def fields(self) -> dict[str, Any]:
        """Return the six writable fields (no id)."""
        data = asdict(self)
        data.pop("id")
        return data


def _text(value: Any, default: str) -> str:
    if isinstance(value, str) and value:
        return value
    return default


def _number(value: Any) -> float:
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        return 0.0
    try:
        number = float(value)
    except OverflowError:
        return 0.0
    return number if math.isfinite(number) else 0.0


def location_from_document(document_id: str, data: Mapping[str, Any] | None) -> Location:
    """Build a Location from a stored document body, substituting defaults for bad fields."""
    data = data if isinstance(data, Mapping) else {}
    order = _number(data.get("order"))
    return Location(
        id=document_id,
        name=_text(data.get("name"), DEFAULT_NAME),
        description=_text(data.get("description"), DEFAULT_DESCRIPTION),
        image_url=_text(data.get("image_url"), ""),
        order=int(math.floor(order)),
        x=_number(data.get("x")),
        y=_number(data.get("y")),
    )
