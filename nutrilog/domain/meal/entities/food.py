"""Food entity - single nutritional record logged inside a meal."""

from dataclasses import asdict, dataclass
from typing import Any, Dict

DEFAULT_BRAND = "Marque inconnue"
DEFAULT_IMAGE_URL = ""
DEFAULT_NUTRISCORE = "-"


@dataclass
class Food:
    """
    Entity: Food item sourced from the external food database or a scan.

    Nutrient values are per 100 g as returned by the food database.
    Numeric fields are finite floats; non-negativity is not enforced.

    Identity: ``id`` (barcode or generated). Uniqueness inside one meal is
    not enforced: duplicates are kept as-is.
    """

    id: str
    name: str
    brand: str = DEFAULT_BRAND
    image_url: str = DEFAULT_IMAGE_URL
    nutriscore: str = DEFAULT_NUTRISCORE
    calories: float = 0.0
    proteins: float = 0.0
    carbs: float = 0.0
    fats: float = 0.0

    def to_dict(self) -> Dict[str, Any]:
        """Serialize to the persisted JSON shape."""
        return asdict(self)
