import logging

from fastapi import APIRouter, Depends, Header, Request
from fastapi.responses import PlainTextResponse
from pydantic import ValidationError
from sqlalchemy.orm import Session

from crypto_ramp_service.app.core.config import settings
from crypto_ramp_service.app.db.session import get_db
from crypto_ramp_service.app.schemas.webhook import MoonPayWebhook
from crypto_ramp_service.app.services import transaction_service
from crypto_ramp_service.app.services.moonpay_service import verify_webhook_signature

logger = logging.getLogger(__name__)

router = APIRouter(prefix="/api/webhook", tags=["Webhooks"])


@router.post("/moonpay", response_class=PlainTextResponse)
async def moonpay_webhook(
    request: Request,
    moonpay_signature: str | None = Header(None, alias="Moonpay-Signature-V2"),
    db: Session = Depends(get_db),
):
    """
    Called by MoonPay on transaction status changes.

    Answers 200 even for transactions we do not track, so MoonPay does not keep retrying.
    """
    body = await request.body()

    if settings.MOONPAY_WEBHOOK_KEY and not verify_webhook_signature(
        body, moonpay_signature, settings.MOONPAY_WEBHOOK_KEY
    ):
        return PlainTextResponse("Invalid signature", status_code=400)

    try:
        payload = MoonPayWebhook.model_validate_json(body)
    except ValidationError:
        # Unparseable on every redelivery too; 500 is kept for failures while applying an update
        return PlainTextResponse("Invalid payload", status_code=400)

    try:
        transaction_service.apply_webhook(db, payload.data)
    except Exception:
        logger.exception("Webhook error for MoonPay transaction %s", payload.data.id)
        db.rollback()
        return PlainTextResponse("Error processing webhook", status_code=500)

    return PlainTextResponse("OK", status_code=200)
