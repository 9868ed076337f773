from sqlmodel import SQLModel

class CartAddRequest(SQLModel):
    product_id: int

class CartDeleteRequest(SQLModel):
    product_id: int
