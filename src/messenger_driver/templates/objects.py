"""Value objects embedded in receipt templates."""

from __future__ import annotations

from typing import Any

from pydantic import BaseModel, ConfigDict


class _TemplateObject(BaseModel):
    model_config = ConfigDict(frozen=True)

    def to_dict(self) -> dict[str, Any]:
        return self.model_dump(exclude_none=True)


class Element(_TemplateObject):
    """A purchased item line."""

    title: str
    price: float
    subtitle: str | None = None
    quantity: int | None = None
    currency: str | None = None
    image_url: str | None = None


class Address(_TemplateObject):
    street_1: str
    city: str
    postal_code: str
    state: str
    country: str
    street_2: str | None = None


class Summary(_TemplateObject):
    total_cost: float
    subtotal: float | None = None
    shipping_cost: float | None = None
    total_tax: float | None = None


class Adjustment(_TemplateObject):
    """Discount or surcharge applied to the order."""

    name: str
    amount: float
