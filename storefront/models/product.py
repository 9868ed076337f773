from sqlmodel import SQLModel, Field
from typing import Optional
from datetime import datetime

from storefront.utils.timestamps import UTCDateTime, utcnow


class Product(SQLModel, table=True):
    id: Optional[int] = Field(default=None, primary_key=True)
    title: str
    price: float
    description: str
    image_url: str

    # owner (admin who created the product)
    user_id: int = Field(foreign_key="user.id", index=True)

    created_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
    updated_at: datetime = Field(default_factory=utcnow, sa_type=UTCDateTime)
