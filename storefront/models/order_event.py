from datetime import datetime
from typing import Optional

from sqlalchemy import JSON, Column
from sqlmodel import Field, SQLModel

from storefront.utils.timestamps import UTCDateTime, utcnow


class OrderEvent(SQLModel, table=True):
    """One row per order state change. Rows are never updated."""

    __tablename__ = "order_event"

    id: Optional[int] = Field(default=None, primary_key=True)
    order_id: int = Field(foreign_key="order.id", index=True)

    # "created" or "payment_received"
    event_type: str = Field(index=True)
    from_status: Optional[str] = None
    to_status: str

    # provider event that caused the change, when there is one
    external_event_id: Optional[str] = Field(default=None, index=True)

    meta: Optional[dict] = Field(default=None, sa_column=Column(JSON))
    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
