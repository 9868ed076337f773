from datetime import datetime
from pydantic import BaseModel


class ProductRead(BaseModel):
    id: int
    title: str
    price: float
    description: str
    image_url: str
    user_id: int
    created_at: datetime
    updated_at: datetime

    class Config:
        from_attributes = True
