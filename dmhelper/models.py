# dmhelper/models.py
import math
from decimal import Decimal
from typing import Annotated, Any, List, Optional

from pydantic import BaseModel, ConfigDict, Field, StrictStr, StringConstraints, field_validator
from pydantic_core import PydanticCustomError


class ProductRecord(BaseModel):
    """A catalog product as captured at lookup time.

    Two records are the same product when their identifiers match; name,
    price and image are snapshots and take no part in equality.
    """

    model_config = ConfigDict(frozen=True)

    identifier: str
    name: str = Field(min_length=1)
    unit_price: float = Field(default=0.0, ge=0.0)
    image_reference: Optional[str] = None

    def __eq__(self, other: Any) -> bool:
        if not isinstance(other, ProductRecord):
            return NotImplemented
        return self.identifier == other.identifier

    def __hash__(self) -> int:
        return hash(self.identifier)


class CartLine(BaseModel):
    model_config = ConfigDict(validate_assignment=True)

    record: ProductRecord
    quantity: int = Field(ge=0)

    @property
    def identifier(self) -> str:
        return self.record.identifier

    @property
    def line_total(self) -> float:
        return self.record.unit_price * self.quantity


class CartSummary(BaseModel):
    lines: List[CartLine]
    item_count: int
    total: float
    exchange_rate: float
    converted_total: float


# ---------------------------
# Catalog API payload schema
# ---------------------------
def canonical_gtin(value: Any) -> str:
    """Render a JSON number as a plain decimal string (no exponent, no grouping)."""
    if isinstance(value, bool) or not isinstance(value, (int, float)):
        raise PydanticCustomError(
            "invalid_identifier_type",
            "gtin must be a number, got {received}",
            {"received": type(value).__name__},
        )
    if isinstance(value, int):
        return str(value)
    if not math.isfinite(value):
        raise PydanticCustomError(
            "invalid_identifier_type",
            "gtin must be a number, got {received}",
            {"received": repr(value)},
        )
    if value.is_integer():
        return str(int(value))
    return format(Decimal(repr(value)), "f")


class CatalogTitle(BaseModel):
    headline: Annotated[StrictStr, StringConstraints(strip_whitespace=True, min_length=1)]


class CatalogPrice(BaseModel):
    price: StrictStr


class CatalogImage(BaseModel):
    src: StrictStr


class CatalogProduct(BaseModel):
    gtin: str
    title: CatalogTitle
    price: CatalogPrice
    # only the first entry is read; later entries may be anything
    images: List[Any]

    @field_validator("gtin", mode="before")
    @classmethod
    def _gtin_from_number(cls, value: Any) -> str:
        return canonical_gtin(value)
