from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session

from crypto_ramp_service.app.db.session import get_db
from crypto_ramp_service.app.schemas.transaction import (
    TransactionCreate,
    TransactionCreated,
    TransactionOut,
)
from crypto_ramp_service.app.services import transaction_service
from crypto_ramp_service.app.services.moonpay_service import MoonPayClient, get_moonpay_client

router = APIRouter(prefix="/api/transactions", tags=["Transactions"])


@router.post("", response_model=TransactionCreated)
async def create_transaction(
    payload: TransactionCreate,
    db: Session = Depends(get_db),
    client: MoonPayClient = Depends(get_moonpay_client),
):
    """Create a crypto purchase and relay it to MoonPay. `moonpayUrl` is where the buyer completes payment."""
    txn, redirect_url = await transaction_service.create_transaction(db, client, payload)

    return {
        "transaction": TransactionOut.from_model(txn),
        "moonpayUrl": redirect_url,
    }


@router.get("/{transaction_id}", response_model=TransactionOut)
async def get_transaction(
    transaction_id: int,
    db: Session = Depends(get_db),
    client: MoonPayClient = Depends(get_moonpay_client),
):
    txn = await transaction_service.fetch_transaction(db, client, transaction_id)
    return TransactionOut.from_model(txn)
