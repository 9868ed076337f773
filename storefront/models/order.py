from sqlmodel import SQLModel, Field, Relationship
from typing import List, Optional
from datetime import datetime

from storefront.constants.order_status import OrderStatus
from storefront.models.order_item import OrderItem
from storefront.utils.timestamps import UTCDateTime, utcnow

class Order(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    user_id: int = Field(foreign_key="user.id", index=True)
    user_email: str

    # idempotency key for webhook-driven creation
    external_session_id: str = Field(index=True, unique=True)

    status: str = Field(default=OrderStatus.awaiting_payment.value)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)

    items: List["OrderItem"] = Relationship(back_populates="order")

    @property
    def total(self) -> float:
        return round(sum(i.price * i.quantity for i in self.items), 2)
