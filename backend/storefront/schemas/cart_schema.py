from pydantic import BaseModel, Field

from storefront.schemas.product_schema import ProductOut


class CartItem(BaseModel):
    product: ProductOut
    quantity: int = Field(..., gt=0)

    @property
    def line_total(self) -> float:
        return self.product.price * self.quantity


class AddItemIn(BaseModel):
    product_id: str
    quantity: int = 1


class UpdateQuantityIn(BaseModel):
    quantity: int
