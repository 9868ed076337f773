from fastapi import APIRouter, Depends, Response
from sqlmodel import Session

from storefront.database import get_session
from storefront.models.order import Order
from storefront.models.user import User
from storefront.schemas.orders_schemas import OrderItemRead, OrderRead
from storefront.services.invoice_service import build_invoice, invoice_name
from storefront.services.order_service import get_orders_for_user
from storefront.utils.token import get_current_user

router = APIRouter()


def _order_read(order: Order) -> OrderRead:
    return OrderRead(
        id=order.id,
        status=order.status,
        user_email=order.user_email,
        created_at=order.created_at,
        items=[
            OrderItemRead(
                product_id=i.product_id,
                title=i.title,
                description=i.description,
                price=i.price,
                quantity=i.quantity,
                line_total=i.line_total,
            )
            for i in order.items
        ],
        total=order.total,
        invoice_url=f"/orders/{order.id}/invoice",
    )


@router.get("")
def list_orders(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    orders = get_orders_for_user(session, current_user.id)

    return {
        "page_title": "Your Orders",
        "orders": [_order_read(order) for order in orders],
    }


@router.get("/{order_id}/invoice")
def get_invoice(
    order_id: int,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    order = session.get(Order, order_id)
    pdf_bytes = build_invoice(order, current_user)

    return Response(
        content=pdf_bytes,
        media_type="application/pdf",
        headers={"Content-Disposition": f'inline; filename="{invoice_name(order_id)}"'},
    )
