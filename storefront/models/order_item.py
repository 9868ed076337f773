from sqlmodel import SQLModel, Field , Relationship
from typing import Optional , TYPE_CHECKING

if TYPE_CHECKING:
    from storefront.models.order import Order

class OrderItem(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)

    # not a foreign key: the product may be edited or deleted later
    product_id: Optional[int] = None

    title: str
    description: str = ""
    price: float
    quantity: int

    order: Optional["Order"] = Relationship(back_populates="items")

    @property
    def line_total(self) -> float:
        return self.price * self.quantity
