from fastapi import APIRouter, Depends, File, Form, Query, UploadFile
from fastapi.responses import JSONResponse
from sqlmodel import Session, select

from storefront.config import settings
from storefront.database import get_session
from storefront.models.product import Product
from storefront.models.user import User
from storefront.services.product_service import create_product, delete_product, update_product
from storefront.utils.pagination import paginate
from storefront.utils.token import get_current_user

router = APIRouter()


@router.get("/products")
def list_own_products(
    page: int = Query(1, ge=1),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    query = (
        select(Product)
        .where(Product.user_id == current_user.id)
        .order_by(Product.id)
    )
    data = paginate(session=session, query=query, page=page, limit=settings.items_per_page)
    return {"page_title": "Admin Products", **data}


@router.post("/products", status_code=201)
def add_product(
    title: str = Form(...),
    price: str = Form(...),
    description: str = Form(...),
    image: UploadFile = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return create_product(session, current_user, title, price, description, image)


@router.put("/products/{product_id}")
def edit_product(
    product_id: int,
    title: str = Form(...),
    price: str = Form(...),
    description: str = Form(...),
    image: UploadFile = File(None),
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    return update_product(session, current_user, product_id, title, price, description, image)


@router.delete("/products/{product_id}")
def remove_product(
    product_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
):
    result = delete_product(session, current_user, product_id)

    if not result["image_deleted"] and not result["product_deleted"]:
        return JSONResponse(status_code=500, content={"message": "Deleting image and the product failed."})
    if not result["image_deleted"]:
        return JSONResponse(status_code=500, content={"message": "Deleting image failed."})
    if not result["product_deleted"]:
        return JSONResponse(status_code=500, content={"message": "Deleting product failed."})

    return {"message": "Success!"}
