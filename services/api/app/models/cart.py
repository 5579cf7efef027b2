from __future__ import annotations

from pydantic import BaseModel, Field
from services.api.app.models.catalog import ProductOut
from services.api.app.services.cart import CartLineView


class CartItemInput(BaseModel):
    product_id: str = Field(..., min_length=1)
    # 0 removes the product from the cart.
    unit: int = Field(..., ge=0)


class CartLineOut(BaseModel):
    product: ProductOut
    unit: int

    @classmethod
    def from_view(cls, line: CartLineView) -> CartLineOut:
        return cls(product=ProductOut.model_validate(line.product), unit=line.unit)
