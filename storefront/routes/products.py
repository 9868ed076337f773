from fastapi import APIRouter, Depends, HTTPException, Query
from sqlmodel import Session, select

from storefront.config import settings
from storefront.database import get_session
from storefront.models.product import Product
from storefront.schemas.product_schemas import ProductRead
from storefront.utils.pagination import paginate

router = APIRouter()


def _product_page(session: Session, page: int):
    query = select(Product).order_by(Product.id)
    return paginate(session=session, query=query, page=page, limit=settings.items_per_page)


@router.get("/", summary="Shop index")
def shop_index(
    page: int = Query(1, ge=1),
    session: Session = Depends(get_session)
):
    return {"page_title": "Shop", **_product_page(session, page)}


@router.get("/products", summary="All products")
def list_products(
    page: int = Query(1, ge=1),
    session: Session = Depends(get_session)
):
    return {"page_title": "All Products", **_product_page(session, page)}


@router.get("/products/{product_id}", response_model=ProductRead)
def get_product(product_id: int, session: Session = Depends(get_session)):
    product = session.get(Product, product_id)
    if not product:
        raise HTTPException(404, "Product not found")

    return product
