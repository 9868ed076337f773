import logging
from typing import List, Tuple

from sqlalchemy import delete
from sqlmodel import Session, select

from storefront.exceptions import NotFoundError
from storefront.models.cart import CartItem
from storefront.models.product import Product

logger = logging.getLogger(__name__)


def get_cart_items(session: Session, user_id: int) -> List[Tuple[CartItem, Product]]:
    return session.exec(
        select(CartItem, Product)
        .join(Product, CartItem.product_id == Product.id)
        .where(CartItem.user_id == user_id)
        .order_by(CartItem.id)
    ).all()


def add_to_cart(session: Session, user_id: int, product_id: int) -> CartItem:
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found", field="product_id")

    existing_item = session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        )
    ).first()

    if existing_item:
        existing_item.quantity += 1
        item = existing_item
    else:
        item = CartItem(user_id=user_id, product_id=product_id, quantity=1)

    session.add(item)
    session.commit()
    session.refresh(item)
    return item


def remove_from_cart(session: Session, user_id: int, product_id: int):
    """Drops the product from the cart whatever its quantity."""
    items = session.exec(
        select(CartItem).where(
            CartItem.user_id == user_id,
            CartItem.product_id == product_id
        )
    ).all()

    for item in items:
        session.delete(item)

    session.commit()


def clear_cart(session: Session, user_id: int, commit: bool = True):
    items = session.exec(
        select(CartItem).where(CartItem.user_id == user_id)
    ).all()

    for item in items:
        session.delete(item)

    if commit:
        session.commit()


def remove_product_from_all_carts(session: Session, product_id: int) -> int:
    result = session.execute(
        delete(CartItem).where(CartItem.product_id == product_id)
    )
    if result.rowcount:
        logger.info(f"Removed product {product_id} from {result.rowcount} cart(s)")
    return result.rowcount


def cart_snapshot(session: Session, user_id: int) -> List[dict]:
    """
    Frozen copy of the cart: product data as it is right now.
    Stored with the pending checkout and used for order line items.
    """
    return [
        {
            "product_id": product.id,
            "title": product.title,
            "description": product.description,
            "price": product.price,
            "quantity": item.quantity,
        }
        for item, product in get_cart_items(session, user_id)
    ]


def get_cart_details(session: Session, user_id: int) -> dict:
    item_list = []
    total = 0

    for item, product in get_cart_items(session, user_id):
        line_total = product.price * item.quantity
        total += line_total

        item_list.append({
            "item_id": item.id,
            "product_id": product.id,
            "title": product.title,
            "image_url": product.image_url,
            "price": product.price,
            "quantity": item.quantity,
            "total": line_total
        })

    return {
        "items": item_list,
        "total_sum": round(total, 2)
    }
