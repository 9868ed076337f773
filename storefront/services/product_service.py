import logging
import os
import shutil
from decimal import Decimal, InvalidOperation
from uuid import uuid4

from fastapi import UploadFile
from slugify import slugify
from sqlalchemy.exc import SQLAlchemyError
from sqlmodel import Session

from storefront.config import settings
from storefront.exceptions import NotFoundError, UnauthorizedError, ValidationError
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.cart_service import remove_product_from_all_carts
from storefront.utils.timestamps import utcnow

logger = logging.getLogger(__name__)

ALLOWED_IMAGE_TYPES = {"image/png", "image/jpg", "image/jpeg"}


def clean_title(title: str) -> str:
    title = (title or "").strip()
    if len(title) < 3:
        raise ValidationError("Invalid Title. (Should be a string and length > 3)", field="title")
    return title


def clean_price(price: str) -> float:
    try:
        value = Decimal(str(price).strip())
    except InvalidOperation:
        value = None

    if value is None or not value.is_finite() or value <= 0 or value.as_tuple().exponent < -2:
        raise ValidationError("Invalid price. (Should be a currency number)", field="price")
    return float(value)


def clean_description(description: str) -> str:
    description = (description or "").strip()
    if not 3 <= len(description) <= 400:
        raise ValidationError(
            "Invalid description (Should have length > 3 and < 400", field="description"
        )
    return description


def save_image(image: UploadFile) -> str:
    if image is None or image.content_type not in ALLOWED_IMAGE_TYPES:
        raise ValidationError("Attached file is not an image.", field="image")

    name, ext = os.path.splitext(image.filename or "")
    filename = f"{uuid4()}-{slugify(name) or 'image'}{ext.lower()}"

    os.makedirs(settings.upload_dir, exist_ok=True)
    path = os.path.join(settings.upload_dir, filename)

    with open(path, "wb") as out:
        shutil.copyfileobj(image.file, out)

    return path


def delete_image(path: str):
    os.remove(path)


def get_owned_product(session: Session, product_id: int, user: User) -> Product:
    product = session.get(Product, product_id)
    if not product:
        raise NotFoundError("Product not found.")

    if product.user_id != user.id:
        raise UnauthorizedError("Only the owner can change this product.")

    return product


def create_product(
    session: Session,
    user: User,
    title: str,
    price: str,
    description: str,
    image: UploadFile,
) -> Product:
    product = Product(
        title=clean_title(title),
        price=clean_price(price),
        description=clean_description(description),
        image_url="",
        user_id=user.id,
    )
    product.image_url = save_image(image)

    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Created Product: {product.title} with id: {product.id}")
    return product


def update_product(
    session: Session,
    user: User,
    product_id: int,
    title: str,
    price: str,
    description: str,
    image: UploadFile | None = None,
) -> Product:
    product = get_owned_product(session, product_id, user)

    product.title = clean_title(title)
    product.price = clean_price(price)
    product.description = clean_description(description)

    if image is not None:
        old_image = product.image_url
        product.image_url = save_image(image)
        try:
            delete_image(old_image)
        except OSError as e:
            logger.warning(f"Could not delete old image {old_image}: {e}")

    product.updated_at = utcnow()
    session.add(product)
    session.commit()
    session.refresh(product)

    logger.info(f"Updated product {product.id}")
    return product


def delete_product(session: Session, user: User, product_id: int) -> dict:
    """
    Remove the image file and, independently, the product row together
    with every cart line pointing at it. Order items keep their copy.

    Returns which of the two deletions failed, if any.
    """
    product = get_owned_product(session, product_id, user)
    image_path = product.image_url

    image_ok = True
    try:
        delete_image(image_path)
    except OSError as e:
        image_ok = False
        logger.error(f"Deleting image {image_path} failed: {e}")

    product_ok = True
    try:
        remove_product_from_all_carts(session, product_id)
        session.delete(product)
        session.commit()
        logger.info(f"Deleted product {product_id}")
    except SQLAlchemyError:
        session.rollback()
        product_ok = False
        logger.exception(f"Deleting product {product_id} failed")

    return {"image_deleted": image_ok, "product_deleted": product_ok}
