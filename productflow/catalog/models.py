"""
Pydantic models for catalog form input.

Each model mirrors one form of the wizard. Blank optional strings are
normalized to None so they are written as NULL.
"""

from typing import Dict, List, Optional

from pydantic import BaseModel, Field, field_validator

from ..config.defaults import (
    DEFAULT_CURRENCY,
    DEFAULT_RATING,
    OPTION_DATA_TYPES,
    RATING_CATEGORIES,
    RATING_MAX,
    RATING_MIN,
)


class StepInputError(Exception):
    """Form input is missing or inconsistent with earlier steps."""
    pass


def _blank_to_none(v: Optional[str]) -> Optional[str]:
    if v is None:
        return None
    v = v.strip()
    return v or None


# ============================================================
# Brand and Product Line
# ============================================================

class BrandInput(BaseModel):
    """A brand to create."""

    name: str = Field(..., min_length=1, description="Brand name")
    website: Optional[str] = Field(None, description="Brand website")
    contact_email: Optional[str] = Field(None, description="Contact email")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Brand name is required")
        return v

    @field_validator("website", "contact_email")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("contact_email")
    @classmethod
    def validate_email(cls, v: Optional[str]) -> Optional[str]:
        if v and "@" not in v:
            raise ValueError(f"Invalid email address: {v}")
        return v


class ProductLineInput(BaseModel):
    """A product line to create under a brand."""

    name: str = Field(..., min_length=1, description="Product line name")
    description: Optional[str] = Field(None, description="Short description")
    target_species: List[str] = Field(default_factory=list, description="Species the line is for")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("Product line name is required")
        return v

    @field_validator("description")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @field_validator("target_species")
    @classmethod
    def clean_species(cls, v: List[str]) -> List[str]:
        return [s.strip().lower() for s in v if s and s.strip()]


# ============================================================
# Variants and Options
# ============================================================

class VariantInput(BaseModel):
    """One product variant row. Rows without a name are ignored."""

    name: str = Field(default="", description="Variant name, e.g. 'Chicken & Rice 5lb'")
    image_url: Optional[str] = Field(None, description="Image URL")
    lookup_key: Optional[str] = Field(None, description="UPC/EAN/barcode")
    asin: Optional[str] = Field(None, description="Amazon ASIN")

    @field_validator("name")
    @classmethod
    def strip_name(cls, v: str) -> str:
        return v.strip()

    @field_validator("image_url", "lookup_key", "asin")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def is_named(self) -> bool:
        return bool(self.name)


class OptionInput(BaseModel):
    """A selectable product attribute (size, flavor, weight...) and its values."""

    name: str = Field(default="", description="Option key, e.g. 'weight'")
    label: str = Field(default="", description="Display label, e.g. 'Weight'")
    data_type: str = Field(default="text", description="text, number or boolean")
    unit: Optional[str] = Field(None, description="Unit such as lbs or oz")
    values: List[str] = Field(default_factory=list, description="Option values")

    @field_validator("data_type")
    @classmethod
    def validate_data_type(cls, v: str) -> str:
        allowed = [t["value"] for t in OPTION_DATA_TYPES]
        if v not in allowed:
            raise ValueError(f"Data type must be one of {allowed}, got {v}")
        return v

    @field_validator("unit")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def is_complete(self) -> bool:
        """Name, label and at least one non-blank value."""
        return bool(
            self.name.strip()
            and self.label.strip()
            and any(value.strip() for value in self.values)
        )


class VariantOptionAssignment(BaseModel):
    """The option value chosen for one variant."""

    variant_id: str
    option_id: str
    value_id: Optional[str] = None


# ============================================================
# Ingredients and Sources
# ============================================================

class IngredientListInput(BaseModel):
    """Ingredient names for one variant, in label order."""

    names: List[str] = Field(default_factory=list)

    @field_validator("names")
    @classmethod
    def clean_names(cls, v: List[str]) -> List[str]:
        return [n.strip() for n in v if n and n.strip()]

    @classmethod
    def from_text(cls, text: str) -> "IngredientListInput":
        """Parse a comma separated ingredient panel."""
        return cls(names=text.split(","))


class SourceInput(BaseModel):
    """Where a variant can be bought."""

    variant_id: str
    retailer_name: str = Field(..., description="Retailer name")
    url: str = Field(..., description="Product page URL")
    price: Optional[float] = Field(None, ge=0, description="Listed price")
    currency: str = Field(default=DEFAULT_CURRENCY, description="ISO currency code")
    availability: Optional[str] = Field(None, description="in_stock, out_of_stock, ...")
    source_type: Optional[str] = Field(None, description="online, retail, manufacturer")

    @field_validator("retailer_name", "url")
    @classmethod
    def required_text(cls, v: str) -> str:
        v = v.strip()
        if not v:
            raise ValueError("This field is required")
        return v

    @field_validator("url")
    @classmethod
    def validate_url(cls, v: str) -> str:
        if not v.startswith(("http://", "https://")):
            raise ValueError(f"URL must start with http:// or https://: {v}")
        return v

    @field_validator("currency")
    @classmethod
    def upper_currency(cls, v: str) -> str:
        v = v.strip().upper()
        if len(v) != 3:
            raise ValueError(f"Currency must be a 3-letter code: {v}")
        return v

    @field_validator("availability", "source_type")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)


# ============================================================
# Nutrition and Rating
# ============================================================

class NutrientInput(BaseModel):
    """One guaranteed-analysis row. Rows without a key or value are ignored."""

    key: str = Field(default="", description="Nutrient key, e.g. 'protein'")
    value: Optional[float] = Field(None, description="Measured value")
    unit: Optional[str] = Field("%", description="Unit, e.g. % or kcal/cup")

    @field_validator("value", mode="before")
    @classmethod
    def parse_value(cls, v):
        if isinstance(v, str):
            v = v.strip()
            return float(v) if v else None
        return v

    @field_validator("unit")
    @classmethod
    def optional_text(cls, v: Optional[str]) -> Optional[str]:
        return _blank_to_none(v)

    @property
    def is_filled(self) -> bool:
        return bool(self.key.strip()) and self.value is not None


class CustomFactor(BaseModel):
    """A rating factor outside the standard list."""

    key: str = ""
    value: float = Field(default=DEFAULT_RATING, ge=RATING_MIN, le=RATING_MAX)


def _default_factors() -> Dict[str, float]:
    return {c["key"]: DEFAULT_RATING for c in RATING_CATEGORIES}


class RatingInput(BaseModel):
    """A product line rating on a 1-10 scale."""

    overall_score: Optional[float] = Field(None, ge=RATING_MIN, le=RATING_MAX)
    factors: Dict[str, float] = Field(default_factory=_default_factors)
    custom_factors: List[CustomFactor] = Field(default_factory=list)

    @field_validator("factors")
    @classmethod
    def validate_range(cls, v: Dict[str, float]) -> Dict[str, float]:
        for key, score in v.items():
            if not RATING_MIN <= score <= RATING_MAX:
                raise ValueError(f"Rating for {key} must be between {RATING_MIN} and {RATING_MAX}")
        return v
