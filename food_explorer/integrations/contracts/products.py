"""
Product catalogue contracts.

Defines the structure of product information served to explorer clients:
- Product (code, names, images, categories, ingredients, nutrition grade, nutriments)
- PageEnvelope, the fixed pagination wrapper returned by every listing operation

Both the real Open Food Facts client and the mock catalogue feed raw JSON through
food_explorer.integrations.policy.response_wrappers, which builds these models.
Unknown upstream fields are kept so the HTTP layer can pass them through.
"""

from __future__ import annotations

from typing import Any, Dict, List, Optional

from pydantic import BaseModel, ConfigDict, Field, field_validator

NUTRITION_GRADES = ("a", "b", "c", "d", "e")
UNKNOWN_PRODUCT_NAME = "Unknown Product"


class Nutriments(BaseModel):
    """Nutritional values per 100g; every field is optional upstream."""

    model_config = ConfigDict(extra="allow", populate_by_name=True, frozen=True)

    energy_kcal_100g: Optional[float] = Field(default=None, alias="energy-kcal_100g")
    fat_100g: Optional[float] = None
    carbohydrates_100g: Optional[float] = None
    proteins_100g: Optional[float] = None
    fiber_100g: Optional[float] = None
    salt_100g: Optional[float] = None
    sugars_100g: Optional[float] = None

    @field_validator("*", mode="before")
    @classmethod
    def _blank_or_invalid_to_none(cls, v):
        return _to_float(v)


class Product(BaseModel):
    """
    A product as returned by the upstream database, identified by its barcode.

    Immutable once fetched.
    """

    model_config = ConfigDict(extra="allow", frozen=True)

    code: str
    product_name: Optional[str] = None
    product_name_en: Optional[str] = None
    image_url: Optional[str] = None
    image_small_url: Optional[str] = None
    categories: Optional[str] = None
    categories_tags: List[str] = Field(default_factory=list)
    ingredients_text: Optional[str] = None
    ingredients_text_en: Optional[str] = None
    nutriscore_grade: Optional[str] = None
    nutriscore_score: Optional[float] = None
    nutriments: Nutriments = Field(default_factory=Nutriments)
    labels: Optional[str] = None
    labels_tags: List[str] = Field(default_factory=list)
    brands: Optional[str] = None
    quantity: Optional[str] = None
    packaging: Optional[str] = None

    @field_validator("code", mode="before")
    @classmethod
    def _code_as_string(cls, v):
        if v is None:
            raise ValueError("product code is required")
        code = str(v).strip()
        if not code:
            raise ValueError("product code is required")
        return code

    @field_validator(
        "product_name",
        "product_name_en",
        "image_url",
        "image_small_url",
        "categories",
        "ingredients_text",
        "ingredients_text_en",
        "labels",
        "brands",
        "quantity",
        "packaging",
        mode="before",
    )
    @classmethod
    def _coerce_text(cls, v):
        if v is None or isinstance(v, str):
            return v
        if isinstance(v, (int, float)):
            return str(v)
        return None

    @field_validator("categories_tags", "labels_tags", mode="before")
    @classmethod
    def _tags_list(cls, v):
        if not isinstance(v, list):
            return []
        return [str(t) for t in v if t is not None]

    @field_validator("nutriscore_grade", mode="before")
    @classmethod
    def _normalize_grade(cls, v):
        if not isinstance(v, str):
            return None
        grade = v.strip().lower()
        return grade if grade in NUTRITION_GRADES else None

    @field_validator("nutriscore_score", mode="before")
    @classmethod
    def _score(cls, v):
        return _to_float(v)

    @field_validator("nutriments", mode="before")
    @classmethod
    def _nutriments_mapping(cls, v):
        return v if isinstance(v, (dict, Nutriments)) else {}

    @classmethod
    def from_api(cls, data: Dict[str, Any]) -> "Product":
        return cls.model_validate(data)

    # --- Display fallbacks ------------------------------------------------------

    @property
    def display_name(self) -> str:
        return _first_text(self.product_name, self.product_name_en) or UNKNOWN_PRODUCT_NAME

    @property
    def display_image_url(self) -> Optional[str]:
        return _first_text(self.image_url, self.image_small_url)

    @property
    def display_ingredients(self) -> Optional[str]:
        return _first_text(self.ingredients_text, self.ingredients_text_en)

    @property
    def primary_category(self) -> Optional[str]:
        """First entry of the free-text category list."""
        if not self.categories:
            return None
        first = self.categories.split(",")[0].strip()
        return first or None

    @property
    def grade_label(self) -> str:
        return self.nutriscore_grade.upper() if self.nutriscore_grade else "N/A"


class PageEnvelope(BaseModel):
    """Normalized pagination wrapper: page is 1-based, page_count = ceil(total_count / page_size)."""

    items: List[Product] = Field(default_factory=list)
    total_count: int = Field(default=0, ge=0)
    page: int = Field(default=1, ge=1)
    page_size: int = Field(default=24, ge=0)
    page_count: int = Field(default=0, ge=0)

    @classmethod
    def empty(cls, page: int = 1, page_size: int = 24) -> "PageEnvelope":
        return cls(items=[], total_count=0, page=max(page, 1), page_size=max(page_size, 0), page_count=0)

    @property
    def has_more(self) -> bool:
        return self.page < self.page_count

    def to_payload(self) -> Dict[str, Any]:
        return self.model_dump(mode="json", by_alias=True)


def _first_text(*values: Optional[str]) -> Optional[str]:
    for value in values:
        if value and value.strip():
            return value
    return None


def _to_float(v: Any) -> Optional[float]:
    if v is None or isinstance(v, bool):
        return None
    if isinstance(v, (int, float)):
        return float(v)
    if isinstance(v, str):
        try:
            return float(v.strip())
        except ValueError:
            return None
    return None
