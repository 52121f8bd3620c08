"""OpenFoodFacts food database client."""

from .client import OpenFoodFactsClient, map_product_to_food

__all__ = ["OpenFoodFactsClient", "map_product_to_food"]
