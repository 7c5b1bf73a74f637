"""
Purchase lifecycle: create locally, relay to MoonPay, reconcile on read and on webhook.

The local status is a mirror of whatever MoonPay reports. There is no terminal
state check, so every fetch with an external id re-queries the processor.
"""
import logging

from sqlalchemy.orm import Session

from crypto_ramp_service.app.core.errors import ErrorMessage, is_not_found, processor_error
from crypto_ramp_service.app.core.exceptions import AppException
from crypto_ramp_service.app.models.transaction import Transaction
from crypto_ramp_service.app.repositories import transaction_repository, user_repository
from crypto_ramp_service.app.schemas.moonpay import Customer, RemoteTransactionRequest
from crypto_ramp_service.app.schemas.transaction import TransactionCreate
from crypto_ramp_service.app.schemas.webhook import MoonPayWebhookData
from crypto_ramp_service.app.services.moonpay_service import MoonPayClient

logger = logging.getLogger(__name__)


async def create_transaction(
    db: Session,
    client: MoonPayClient,
    payload: TransactionCreate,
) -> tuple[Transaction, str | None]:
    user = user_repository.get_user(db, payload.userId)

    # Reserved and committed before MoonPay is called
    txn = transaction_repository.create(
        db,
        user_id=user.id,
        amount=payload.amount,
        currency=payload.currency,
        crypto_currency=payload.cryptoCurrency,
        payment_method=payload.paymentMethod,
    )

    request = RemoteTransactionRequest(
        wallet_address=payload.userDetails.walletAddress,
        crypto_currency=payload.cryptoCurrency,
        amount=payload.amount,
        currency=payload.currency,
        external_transaction_id=str(txn.id),
        customer=Customer(
            id=user.id,
            first_name=user.first_name,
            last_name=user.last_name,
            email=user.email,
            phone=user.phone,
        ),
        payment=payload.payment(),
    )

    try:
        remote = await client.create_remote_transaction(request)
    except AppException as exc:
        logger.error(
            "Transaction %s left pending, MoonPay create failed: %s %s",
            txn.id,
            exc.message,
            exc.details,
        )
        raise processor_error(ErrorMessage.TRANSACTION_FAILED, exc.details) from exc

    txn = transaction_repository.update(
        db,
        txn.id,
        moonpay_transaction_id=remote.external_id,
        status=remote.status,
    )
    return txn, remote.redirect_url


async def fetch_transaction(db: Session, client: MoonPayClient, transaction_id: int) -> Transaction:
    txn = transaction_repository.get_by_id(db, transaction_id)

    if not txn.moonpay_transaction_id:
        return txn

    try:
        remote = await client.fetch_remote_transaction(txn.moonpay_transaction_id)
    except AppException as exc:
        if is_not_found(exc):
            raise
        logger.error("Error fetching transaction %s: %s %s", txn.id, exc.message, exc.details)
        raise processor_error(ErrorMessage.FETCH_FAILED, exc.details) from exc

    return transaction_repository.update(
        db,
        txn.id,
        status=remote.status,
        crypto_amount=remote.crypto_amount,
    )


def apply_webhook(db: Session, data: MoonPayWebhookData) -> Transaction | None:
    """Merge a MoonPay status push. Unknown external ids are dropped."""
    try:
        txn = transaction_repository.get_by_external_id(db, data.id)
    except AppException as exc:
        if not is_not_found(exc):
            raise
        logger.info("Ignoring webhook for untracked MoonPay transaction %s", data.id)
        return None

    changes = {"status": data.status}
    if "cryptoAmount" in data.model_fields_set:
        changes["crypto_amount"] = data.cryptoAmount

    logger.info("Webhook moved transaction %s from %s to %s", txn.id, txn.status, data.status)
    return transaction_repository.update(db, txn.id, **changes)
