from datetime import datetime
from pydantic import BaseModel
from typing import List, Optional

class OrderItemRead(BaseModel):
    product_id: Optional[int]
    title: str
    description: str
    price: float
    quantity: int
    line_total: float

class OrderRead(BaseModel):
    id: int
    status: str
    user_email: str
    created_at: datetime
    items: List[OrderItemRead]
    total: float
    invoice_url: str
