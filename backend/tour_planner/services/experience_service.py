# backend/tour_planner/services/experience_service.py

import asyncio
from datetime import date, timedelta
from typing import Any, Dict, Iterable, List, Optional

import requests
from pydantic import ValidationError

from tour_planner.core.config_loader import settings
from tour_planner.core.exceptions import CatalogFetchError
from tour_planner.core.logger import logger
from tour_planner.models.experience_models import (
    AvailabilityWindow,
    ExperienceCatalogEntry,
    ExperienceImage,
    InventoryIndex,
    Tour,
    Variant,
)
from tour_planner.utils.time_utils import parse_iso_date, today


PLACEHOLDER_IMAGE = "/api/placeholder/400/250"


# -------------------------------------------------------
# TRANSFORMS (pure)
# -------------------------------------------------------
def transform_experience(data: Dict[str, Any]) -> ExperienceCatalogEntry:
    """Turn a raw tour-group payload into a catalog entry (no inventory yet)."""
    name = data.get("name") or ""
    country = ((data.get("city") or {}).get("country") or {})
    currency_info = country.get("currency") or {}
    currency = currency_info.get("code") or "USD"

    uploads = data.get("imageUploads") or []
    product_images = (data.get("media") or {}).get("productImages") or []

    images = [
        ExperienceImage(url=img["url"], alt=img.get("alt"), description=img.get("title"))
        for img in uploads if img.get("url")
    ] + [
        ExperienceImage(url=img["url"], alt=img.get("altText"), description=img.get("description"))
        for img in product_images if img.get("url")
    ]

    variants = []
    for raw_variant in data.get("variants") or []:
        listing = raw_variant.get("listingPrice") or {}
        variants.append(Variant(
            id=raw_variant["id"],
            name=raw_variant.get("name") or "",
            variant_info=raw_variant.get("variantInfo"),
            price=listing.get("finalPrice") or 0,
            original_price=listing.get("originalPrice") or 0,
            currency=listing.get("currencyCode") or currency,
            tours=[
                Tour(
                    id=tour["id"],
                    name=tour.get("name") or "",
                    duration=tour.get("duration"),
                    inventory_type=tour.get("inventoryType"),
                    min_pax=tour.get("minPax"),
                    max_pax=tour.get("maxPax"),
                )
                for tour in raw_variant.get("tours") or []
            ],
        ))

    return ExperienceCatalogEntry(
        id=int(data["id"]),
        name=name,
        description=data.get("description") or f"Visit {name} and explore this amazing experience.",
        currency=currency,
        currency_symbol=currency_info.get("symbol"),
        image=images[0].url if images else PLACEHOLDER_IMAGE,
        images=images,
        city=(data.get("city") or {}).get("displayName"),
        variants=variants,
        selected_variant=variants[0].id if variants else 0,
    )


def build_inventory_index(availabilities: Iterable[Dict[str, Any]]) -> InventoryIndex:
    """Group availability windows by tour id, then by start date, keeping service order."""
    inventory: InventoryIndex = {}
    for raw in availabilities:
        try:
            window = AvailabilityWindow.model_validate(raw)
        except ValidationError as e:
            logger.warning(f"Skipping malformed availability: {e.error_count()} error(s)")
            continue
        inventory.setdefault(window.tour_id, {}).setdefault(window.start_date, []).append(window)
    return inventory


# -------------------------------------------------------
# SERVICE
# -------------------------------------------------------
class ExperienceService:
    def __init__(self, base_url: Optional[str] = None, timeout: Optional[float] = None):
        self.base_url = (base_url or settings.catalog_base_url).rstrip("/")
        self.timeout = timeout or settings.catalog_timeout_seconds

    def _get(self, url: str, experience_id: str, params: Optional[Dict[str, Any]] = None) -> Dict[str, Any]:
        try:
            resp = requests.get(url, params=params, timeout=self.timeout)
            resp.raise_for_status()
            return resp.json()
        except requests.exceptions.HTTPError as e:
            status = e.response.status_code if e.response is not None else "N/A"
            raise CatalogFetchError(experience_id, f"HTTP {status}") from e
        except requests.exceptions.RequestException as e:
            raise CatalogFetchError(experience_id, str(e)) from e
        except ValueError as e:
            raise CatalogFetchError(experience_id, f"invalid JSON ({e})") from e

    # -------------------------------------------------------
    # CATALOG
    # -------------------------------------------------------
    def fetch_experience(self, experience_id) -> ExperienceCatalogEntry:
        experience_id = str(experience_id)
        data = self._get(f"{self.base_url}/api/v6/tour-groups/{experience_id}", experience_id)
        try:
            return transform_experience(data)
        except (KeyError, TypeError, ValueError, AttributeError) as e:
            raise CatalogFetchError(experience_id, f"unexpected payload ({e})") from e

    # -------------------------------------------------------
    # INVENTORY
    # -------------------------------------------------------
    def fetch_inventory(self, experience_id, variant_id: int, from_date: Optional[date] = None) -> InventoryIndex:
        experience_id = str(experience_id)
        start = parse_iso_date(from_date) if from_date else today()
        end = start + timedelta(days=settings.inventory_window_days)

        params = {
            "variantId": variant_id,
            "from-date": start.isoformat(),
            "to-date": end.isoformat(),
        }
        data = self._get(f"{self.base_url}/api/v7/tour-groups/{experience_id}/inventories/", experience_id, params)
        if not isinstance(data, dict):
            raise CatalogFetchError(experience_id, "unexpected inventory payload")
        return build_inventory_index(data.get("availabilities") or [])

    # -------------------------------------------------------
    # ONE ID (catalog, then its inventory)
    # -------------------------------------------------------
    async def _resolve_one(self, experience_id: str, from_date: Optional[date]) -> Optional[ExperienceCatalogEntry]:
        try:
            entry = await asyncio.to_thread(self.fetch_experience, experience_id)
        except CatalogFetchError as e:
            logger.warning(str(e))
            return None

        if entry.selected_variant:
            try:
                inventory = await asyncio.to_thread(
                    self.fetch_inventory, experience_id, entry.selected_variant, from_date
                )
                entry = entry.model_copy(update={"inventory": inventory})
            except CatalogFetchError as e:
                logger.warning(f"Error fetching inventory for variant {entry.selected_variant}: {e}")

        return entry

    # -------------------------------------------------------
    # BATCH
    # -------------------------------------------------------
    async def fetch_catalog(
        self,
        experience_ids: Iterable,
        from_date: Optional[date] = None,
    ) -> List[ExperienceCatalogEntry]:
        """
        Resolve every id concurrently. Failed ids are logged and dropped;
        the batch itself never raises. Result order follows input order.
        """
        unique_ids: List[str] = []
        for experience_id in experience_ids:
            key = str(experience_id)
            if key not in unique_ids:
                unique_ids.append(key)

        if not unique_ids:
            return []

        results = await asyncio.gather(*(self._resolve_one(eid, from_date) for eid in unique_ids))
        resolved = [entry for entry in results if entry is not None]

        logger.info(f"Resolved {len(resolved)}/{len(unique_ids)} experiences")
        return resolved
