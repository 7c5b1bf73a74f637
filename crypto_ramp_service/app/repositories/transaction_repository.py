"""
Transaction record store.

Rows are created once, mutated only through ``update`` and never deleted.
There is no locking: two writers on the same row are last-write-wins.
"""
from decimal import Decimal, InvalidOperation

from sqlalchemy.orm import Session
from sqlalchemy.sql import func

from crypto_ramp_service.app.core.errors import (
    ErrorCode,
    ErrorMessage,
    not_found,
    validation_error,
)
from crypto_ramp_service.app.models.transaction import (
    AMOUNT_DIGITS,
    AMOUNT_PLACES,
    INITIAL_STATUS,
    MUTABLE_FIELDS,
    PAYMENT_METHODS,
    Transaction,
)

REQUIRED_FIELDS = ("user_id", "amount", "currency", "crypto_currency", "payment_method")

AMOUNT_QUANTUM = Decimal(1).scaleb(-AMOUNT_PLACES)
AMOUNT_LIMIT = Decimal(10) ** (AMOUNT_DIGITS - AMOUNT_PLACES)


def _to_decimal(field: str, value) -> Decimal:
    try:
        return Decimal(str(value))
    except (InvalidOperation, ValueError):
        raise validation_error(f"{field} must be a number", {"field": field})


def _validate_new(fields: dict) -> dict:
    missing = [f for f in REQUIRED_FIELDS if fields.get(f) in (None, "")]
    if missing:
        raise validation_error("Missing required fields", {"missing": missing})

    unknown = set(fields) - set(REQUIRED_FIELDS) - set(MUTABLE_FIELDS)
    if unknown:
        raise validation_error("Unknown fields", {"unknown": sorted(unknown)})

    amount = _to_decimal("amount", fields["amount"])
    if not amount.is_finite() or amount <= 0:
        raise validation_error("amount must be positive", {"field": "amount"})
    if amount >= AMOUNT_LIMIT:
        raise validation_error("amount is too large", {"field": "amount"})
    if amount != amount.quantize(AMOUNT_QUANTUM):
        raise validation_error(
            f"amount must have at most {AMOUNT_PLACES} decimal places",
            {"field": "amount"},
        )

    if fields["payment_method"] not in PAYMENT_METHODS:
        raise validation_error(
            "Unsupported payment method",
            {"field": "payment_method", "allowed": list(PAYMENT_METHODS)},
        )

    clean = dict(fields)
    clean["amount"] = amount
    clean.setdefault("status", INITIAL_STATUS)
    if clean.get("crypto_amount") is not None:
        clean["crypto_amount"] = _to_decimal("crypto_amount", clean["crypto_amount"])
    return clean


def create(db: Session, **fields) -> Transaction:
    txn = Transaction(**_validate_new(fields))

    db.add(txn)
    db.commit()
    db.refresh(txn)
    return txn


def get_by_id(db: Session, transaction_id: int) -> Transaction:
    txn = db.query(Transaction).filter(Transaction.id == transaction_id).first()
    if not txn:
        raise not_found(ErrorCode.TRANSACTION_NOT_FOUND, ErrorMessage.TRANSACTION_NOT_FOUND)
    return txn


def get_by_external_id(db: Session, external_id: str) -> Transaction:
    txn = (
        db.query(Transaction)
        .filter(Transaction.moonpay_transaction_id == external_id)
        .order_by(Transaction.id.asc())
        .first()
    )
    if not txn:
        raise not_found(ErrorCode.TRANSACTION_NOT_FOUND, ErrorMessage.TRANSACTION_NOT_FOUND)
    return txn


def update(db: Session, transaction_id: int, **changes) -> Transaction:
    immutable = set(changes) - set(MUTABLE_FIELDS)
    if immutable:
        raise validation_error("Fields cannot be changed", {"fields": sorted(immutable)})

    txn = get_by_id(db, transaction_id)

    if changes.get("crypto_amount") is not None:
        changes["crypto_amount"] = _to_decimal("crypto_amount", changes["crypto_amount"])

    for key, value in changes.items():
        setattr(txn, key, value)
    txn.updated_at = func.now()

    db.commit()
    db.refresh(txn)
    return txn
