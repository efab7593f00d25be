"""Product catalog constants.

Categories map to the unit of measure their inventory is counted in.
"""

from django.db import models


class ProductCategory(models.TextChoices):
    SEEDS = "seeds", "Seeds"
    FERTILIZERS = "fertilizers", "Fertilizers"
    PESTICIDES = "pesticides", "Pesticides / Herbicides"
    TOOLS = "tools", "Tools / Equipments"
    MACHINERY = "machinery", "Machinery"
    LIVESTOCK = "livestock", "Livestock"
    IRRIGATION = "irrigation", "Irrigation"
    PRODUCE = "produce", "Vegetables / Fruits"
    DAIRY = "dairy", "Dairy / Eggs"
    MEAT = "meat", "Meat / Poultry"
    OTHER = "other", "Other"


CATEGORY_UNITS: dict[str, str] = {
    ProductCategory.SEEDS: "kg",
    ProductCategory.FERTILIZERS: "kg",
    ProductCategory.PESTICIDES: "l",
    ProductCategory.TOOLS: "units",
    ProductCategory.MACHINERY: "units",
    ProductCategory.LIVESTOCK: "heads",
    ProductCategory.IRRIGATION: "units",
    ProductCategory.PRODUCE: "units",
    ProductCategory.DAIRY: "units",
    ProductCategory.MEAT: "kg",
    ProductCategory.OTHER: "units",
}

DEFAULT_UNIT = "units"
DEFAULT_LOW_STOCK_THRESHOLD = 10


def unit_for_category(category: str) -> str:
    """Return the inventory unit for *category* (``units`` if unknown)."""
    return CATEGORY_UNITS.get(category, DEFAULT_UNIT)
