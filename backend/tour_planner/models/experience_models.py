# backend/tour_planner/models/experience_models.py

from typing import Any, Dict, List, Optional, Union

from pydantic import BaseModel, ConfigDict, Field


# ----------------------------------------------------------
# INVENTORY
# ----------------------------------------------------------
class PricePerson(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    type: str = ""
    retail_price: Optional[float] = Field(None, alias="retailPrice")
    listing_price: Optional[float] = Field(None, alias="listingPrice")
    extra_charges: float = Field(0, alias="extraCharges")
    is_pricing_inclusive_of_extra_charges: bool = Field(False, alias="isPricingInclusiveOfExtraCharges")
    discount: float = 0


class PriceProfile(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    price_profile_type: Optional[str] = Field(None, alias="priceProfileType")
    persons: List[PricePerson] = Field(default_factory=list)
    groups: List[Any] = Field(default_factory=list)
    people: Optional[int] = None


class AvailabilityWindow(BaseModel):
    model_config = ConfigDict(populate_by_name=True, extra="allow")

    start_date: str = Field(..., alias="startDate")
    start_time: str = Field("", alias="startTime")
    end_time: str = Field("", alias="endTime")
    tour_id: int = Field(..., alias="tourId")
    vendor_id: Optional[Union[int, str]] = Field(None, alias="vendorId")
    price_profile: PriceProfile = Field(default_factory=PriceProfile, alias="priceProfile")
    pax_availability: List[Dict[str, Any]] = Field(default_factory=list, alias="paxAvailability")
    pax_validation: Dict[str, Any] = Field(default_factory=dict, alias="paxValidation")


# tour id -> YYYY-MM-DD -> windows in service order
InventoryIndex = Dict[int, Dict[str, List[AvailabilityWindow]]]


# ----------------------------------------------------------
# CATALOG
# ----------------------------------------------------------
class Tour(BaseModel):
    id: int
    name: str = ""
    duration: Optional[int] = None
    inventory_type: Optional[str] = None
    min_pax: Optional[int] = None
    max_pax: Optional[int] = None


class Variant(BaseModel):
    id: int
    name: str = ""
    variant_info: Optional[str] = None
    price: float = 0           # listing finalPrice, informational only
    original_price: float = 0
    currency: str = "USD"
    tours: List[Tour] = Field(default_factory=list)


class ExperienceImage(BaseModel):
    url: str
    alt: Optional[str] = None
    description: Optional[str] = None


class ExperienceCatalogEntry(BaseModel):
    id: int
    name: str
    description: str = ""
    currency: str = "USD"
    currency_symbol: Optional[str] = None
    image: str = "/api/placeholder/400/250"
    images: List[ExperienceImage] = Field(default_factory=list)
    city: Optional[str] = None
    variants: List[Variant] = Field(default_factory=list)
    selected_variant: int = 0
    inventory: Optional[InventoryIndex] = None

    def get_variant(self) -> Optional[Variant]:
        """Selected variant, or the first one when nothing matches the selection."""
        for variant in self.variants:
            if variant.id == self.selected_variant:
                return variant
        return self.variants[0] if self.variants else None
