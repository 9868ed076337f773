from fastapi import APIRouter, BackgroundTasks, Depends, Header, Request
from fastapi.concurrency import run_in_threadpool
from fastapi.responses import JSONResponse
from sqlmodel import Session

from storefront.database import get_session
from storefront.services.webhook_service import handle_event

router = APIRouter()


@router.post("/stripe")
async def stripe_webhook(
    request: Request,
    background_tasks: BackgroundTasks,
    stripe_signature: str | None = Header(default=None, alias="Stripe-Signature"),
    session: Session = Depends(get_session),
):
    # signature is computed over the raw body
    payload = await request.body()

    # database work stays off the event loop
    ack = await run_in_threadpool(handle_event, session, payload, stripe_signature)

    for func, *args in ack.tasks:
        background_tasks.add_task(func, *args)

    return JSONResponse(status_code=ack.status_code, content=ack.body)
