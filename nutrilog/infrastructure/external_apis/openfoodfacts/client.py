"""OpenFoodFacts API client - food lookup by text search or barcode.

Key Features:
- Text search (cgi/search.pl, first page of 10 products)
- Barcode lookup (API v2 product endpoint)
- Circuit breaker (5 failures → 60s timeout)
- Retry logic (exponential backoff) on timeouts and 5xx
- Mapping to Food with per-100g nutrients and French display defaults

Foods returned here are trusted as-is when first added to a meal; they are
only sanitized again when meals are reloaded from storage.
"""
# mypy: warn-unused-ignores=False

import asyncio
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional
from urllib.parse import quote

import httpx
import structlog
from circuitbreaker import circuit
from tenacity import (
    retry,
    retry_if_exception_type,
    stop_after_attempt,
    wait_exponential,
)

from nutrilog.domain.meal.entities.food import DEFAULT_BRAND, DEFAULT_NUTRISCORE, Food
from nutrilog.domain.meal.factories.meal_factory import generate_meal_id
from nutrilog.domain.meal.sanitizer import to_number
from nutrilog.domain.shared.errors import FoodLookupError
from nutrilog.infrastructure.config import get_openfoodfacts_base_url

logger = structlog.get_logger(__name__)

USER_AGENT = "Nutrilog/1.0"
FIELDS = (
    "code,product_name,product_name_fr,product_name_en,"
    "brands,nutriments,image_url,nutriscore_grade"
)
UNNAMED_PRODUCT = "Sans nom"

_TRANSIENT_ERRORS = (asyncio.TimeoutError, ConnectionError, httpx.HTTPError)


def _clean(value: Any) -> str:
    return value.strip() if isinstance(value, str) else ""


def map_product_to_food(product: Dict[str, Any]) -> Food:
    """
    Map an OpenFoodFacts product to a Food.

    Args:
        product: Product JSON (subset of FIELDS)

    Returns:
        Food; ``id`` falls back to ``off-<millis>-<random>`` when the
        product has no code
    """
    nutriments = product.get("nutriments") or {}
    if not isinstance(nutriments, dict):
        nutriments = {}

    name = (
        _clean(product.get("product_name"))
        or _clean(product.get("product_name_fr"))
        or _clean(product.get("product_name_en"))
        or UNNAMED_PRODUCT
    )

    return Food(
        id=_clean(product.get("code")) or f"off-{generate_meal_id(datetime.now(timezone.utc))}",
        name=name,
        brand=_clean(product.get("brands")) or DEFAULT_BRAND,
        image_url=_clean(product.get("image_url")),
        nutriscore=_clean(product.get("nutriscore_grade")).upper() or DEFAULT_NUTRISCORE,
        calories=to_number(nutriments.get("energy-kcal_100g")),
        proteins=to_number(nutriments.get("proteins_100g")),
        carbs=to_number(nutriments.get("carbohydrates_100g")),
        fats=to_number(nutriments.get("fat_100g")),
    )


class OpenFoodFactsClient:
    """
    OpenFoodFacts API client.

    Example:
        >>> async with OpenFoodFactsClient() as client:
        ...     foods = await client.search_foods("yaourt nature")
        ...     food = await client.get_food_by_barcode("3017620422003")
    """

    TIMEOUT_S = 8.0
    PAGE_SIZE = 10

    def __init__(self, base_url: Optional[str] = None) -> None:
        """Initialize client (base URL defaults to OPENFOODFACTS_BASE_URL)."""
        self._base_url = (base_url or get_openfoodfacts_base_url()).rstrip("/")
        self._session: Optional[httpx.AsyncClient] = None

    async def __aenter__(self) -> "OpenFoodFactsClient":
        self._session = httpx.AsyncClient(
            timeout=httpx.Timeout(self.TIMEOUT_S),
            headers={
                "User-Agent": USER_AGENT,
                "X-User-Agent": USER_AGENT,
                "Accept": "application/json",
            },
        )
        return self

    async def __aexit__(self, exc_type: Any, exc_val: Any, exc_tb: Any) -> None:
        if self._session:
            await self._session.aclose()

    def _require_session(self) -> httpx.AsyncClient:
        if not self._session:
            raise RuntimeError("Client not initialized. Use async context manager.")
        return self._session

    @staticmethod
    def _parse_json(response: Any, what: str) -> Dict[str, Any]:
        try:
            data = response.json()
        except ValueError as e:
            raise FoodLookupError(f"Invalid OpenFoodFacts response for {what}") from e
        if not isinstance(data, dict):
            raise FoodLookupError(f"Invalid OpenFoodFacts response for {what}")
        return data

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=_TRANSIENT_ERRORS,
        name="openfoodfacts_search",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def search_foods(self, query: str) -> List[Food]:
        """
        Search foods by free text.

        Args:
            query: Search terms; blank input returns [] without a request

        Returns:
            Up to PAGE_SIZE foods

        Raises:
            FoodLookupError: On non-success status or invalid JSON
            httpx.HTTPError: On network/5xx errors (after retries)
        """
        terms = query.strip()
        if not terms:
            return []

        session = self._require_session()
        params = {
            "search_terms": terms,
            "search_simple": 1,
            "action": "process",
            "json": 1,
            "fields": FIELDS,
            "page_size": self.PAGE_SIZE,
            "page": 1,
        }

        logger.debug("Searching foods", query=terms)
        response = await session.get(f"{self._base_url}/cgi/search.pl", params=params)

        if response.status_code >= 500:
            logger.warning("OpenFoodFacts server error", status=response.status_code)
            raise httpx.HTTPError(f"Server error {response.status_code}")
        if not response.is_success:
            raise FoodLookupError(f"OpenFoodFacts search failed ({response.status_code})")

        data = self._parse_json(response, "search")
        products = data.get("products")
        if not isinstance(products, list):
            return []

        foods = [map_product_to_food(p) for p in products if isinstance(p, dict)]
        logger.info("Food search completed", query=terms, results=len(foods))
        return foods

    @circuit(  # type: ignore[misc]
        failure_threshold=5,
        recovery_timeout=60,
        expected_exception=_TRANSIENT_ERRORS,
        name="openfoodfacts_barcode",
    )
    @retry(  # type: ignore[misc]
        stop=stop_after_attempt(3),
        wait=wait_exponential(multiplier=1, min=2, max=10),
        retry=retry_if_exception_type(_TRANSIENT_ERRORS),
        reraise=True,
    )
    async def get_food_by_barcode(self, barcode: str) -> Optional[Food]:
        """
        Look up a product by barcode.

        Args:
            barcode: EAN/UPC code; blank input returns None without a request

        Returns:
            Food if found, None if unknown (404 or status != 1)

        Raises:
            FoodLookupError: On other non-success status or invalid JSON
            httpx.HTTPError: On network/5xx errors (after retries)
        """
        code = barcode.strip()
        if not code:
            return None

        session = self._require_session()
        response = await session.get(
            f"{self._base_url}/api/v2/product/{quote(code, safe='')}.json",
            params={"fields": FIELDS},
        )

        if response.status_code == 404:
            logger.info("Barcode not found", barcode=code)
            return None
        if response.status_code >= 500:
            logger.warning("OpenFoodFacts server error", barcode=code, status=response.status_code)
            raise httpx.HTTPError(f"Server error {response.status_code}")
        if not response.is_success:
            raise FoodLookupError(f"OpenFoodFacts barcode lookup failed ({response.status_code})")

        data = self._parse_json(response, f"barcode {code}")
        product = data.get("product")
        if data.get("status") != 1 or not isinstance(product, dict) or not product:
            logger.info("Product not found (status=0)", barcode=code)
            return None

        food = map_product_to_food(product)
        logger.info("Barcode lookup successful", barcode=code, product_name=food.name)
        return food
