from fastapi import APIRouter, Depends
from sqlmodel import Session

from storefront.database import get_session
from storefront.models.user import User
from storefront.schemas.cart_schemas import CartAddRequest, CartDeleteRequest
from storefront.services.cart_service import add_to_cart, get_cart_details, remove_from_cart
from storefront.utils.token import get_current_user

router = APIRouter()

# View Cart

@router.get("")
def get_cart(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return get_cart_details(session, current_user.id)

# Add to Cart

@router.post("")
def add_product(
    data: CartAddRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    item = add_to_cart(session, current_user.id, data.product_id)
    return {"message": "Added to cart", "item": item}

# Remove from Cart

@router.post("/delete-item")
def delete_product(
    data: CartDeleteRequest,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    remove_from_cart(session, current_user.id, data.product_id)
    return {"message": "Item removed from cart"}
