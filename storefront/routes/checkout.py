from fastapi import APIRouter, Depends, Request, status
from fastapi.responses import RedirectResponse
from sqlmodel import Session

from storefront.database import get_session
from storefront.models.user import User
from storefront.services.cart_service import get_cart_details
from storefront.services.checkout_service import begin_checkout
from storefront.services.payment_gateway import PaymentGateway, get_payment_gateway
from storefront.utils.token import get_current_user

router = APIRouter()


def _checkout_summary(session: Session, user: User):
    details = get_cart_details(session, user.id)
    return {
        "page_title": "Checkout",
        "products": details["items"],
        "total_sum": details["total_sum"],
    }


@router.get("")
def get_checkout(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return _checkout_summary(session, current_user)


@router.post("")
def post_checkout(
    request: Request,
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user),
    gateway: PaymentGateway = Depends(get_payment_gateway),
):
    redirect_url = begin_checkout(session, current_user, gateway, str(request.base_url))
    return RedirectResponse(redirect_url, status_code=status.HTTP_303_SEE_OTHER)


# The order is created by the webhook, never by this redirect.
@router.get("/success")
def checkout_success(current_user: User = Depends(get_current_user)):
    return RedirectResponse("/orders", status_code=status.HTTP_303_SEE_OTHER)


@router.get("/cancel")
def checkout_cancel(
    session: Session = Depends(get_session),
    current_user: User = Depends(get_current_user)
):
    return _checkout_summary(session, current_user)
