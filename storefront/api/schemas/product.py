# storefront/api/schemas/product.py
from datetime import datetime
from typing import Any, Dict, Optional

from pydantic import BaseModel, ConfigDict, Field, HttpUrl, field_validator
from pydantic.alias_generators import to_camel

from storefront.models.product import Product
from storefront.services.catalog import star_breakdown


class ProductDraft(BaseModel):
    """
    What the admin form (or an API client) submits. Field names travel in
    camelCase (imageUrl, aboutItem, ...) like the stored records.
    Price and rating arrive as text from HTML forms and are coerced here,
    before anything reaches the store.
    """
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True, str_strip_whitespace=True)

    name: str = Field(..., min_length=1)
    details: str = Field(..., min_length=1)
    specifications: str = ""
    about_item: str = ""
    price: float = Field(..., ge=0, allow_inf_nan=False)
    rating: float = Field(..., ge=1, le=5, allow_inf_nan=False)
    category: str = Field(..., min_length=1)
    image_url: HttpUrl
    referral_link: HttpUrl
    return_available: bool = False
    free_delivery: bool = False
    top_brand: bool = False

    @field_validator("specifications", "about_item", mode="before")
    @classmethod
    def default_text(cls, v):
        # convert None to empty string; optional free text
        return "" if v is None else v

    def to_record(self) -> Dict[str, Any]:
        """Store-shaped record without timestamps (the editing service stamps those)."""
        data = self.model_dump(by_alias=True)
        data["imageUrl"] = str(self.image_url)
        data["referralLink"] = str(self.referral_link)
        return data


class StarsOut(BaseModel):
    full: int
    half: bool
    empty: int


class ProductOut(BaseModel):
    model_config = ConfigDict(alias_generator=to_camel, populate_by_name=True)

    id: Optional[str]
    name: str
    details: str
    specifications: str
    about_item: str
    price: float
    rating: float
    category: str
    image_url: str
    referral_link: str
    return_available: bool
    free_delivery: bool
    top_brand: bool
    created_at: Optional[datetime] = None
    updated_at: Optional[datetime] = None
    stars: StarsOut

    @classmethod
    def from_product(cls, product: Product) -> "ProductOut":
        stars = star_breakdown(product.rating)
        return cls(
            id=product.id,
            name=product.name or "",
            details=product.details or "",
            specifications=product.specifications or "",
            about_item=product.about_item or "",
            price=product.price,
            rating=product.rating,
            category=product.category or "",
            image_url=product.image_url or "",
            referral_link=product.referral_link or "",
            return_available=product.return_available,
            free_delivery=product.free_delivery,
            top_brand=product.top_brand,
            created_at=product.created_at,
            updated_at=product.updated_at,
            stars=StarsOut(full=stars.full, half=stars.half, empty=stars.empty),
        )
