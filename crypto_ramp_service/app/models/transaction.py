from sqlalchemy import Column, Integer, String, Numeric, DateTime, ForeignKey
from sqlalchemy.orm import relationship
from sqlalchemy.sql import func

from crypto_ramp_service.app.db.base import Base


# Fiat amount column precision
AMOUNT_DIGITS = 18
AMOUNT_PLACES = 2

PAYMENT_METHODS = ("mobile_money", "card_payment")

INITIAL_STATUS = "pending"

# Columns that may change after the row is written
MUTABLE_FIELDS = ("status", "crypto_amount", "moonpay_transaction_id")


class Transaction(Base):
    __tablename__ = "transactions"

    id = Column(Integer, primary_key=True, autoincrement=True, index=True)

    user_id = Column(Integer, ForeignKey("users.id"), nullable=False, index=True)

    amount = Column(Numeric(AMOUNT_DIGITS, AMOUNT_PLACES), nullable=False)
    currency = Column(String(10), nullable=False)

    crypto_amount = Column(Numeric(28, 10), nullable=True)
    crypto_currency = Column(String(20), nullable=False)

    # Mirrors the processor's vocabulary: pending | waitingPayment | completed | failed ...
    status = Column(String, nullable=False, default=INITIAL_STATUS)
    payment_method = Column(String, nullable=False)  # mobile_money | card_payment

    moonpay_transaction_id = Column(String, nullable=True, index=True)

    created_at = Column(DateTime(timezone=True), server_default=func.now(), nullable=False)
    updated_at = Column(
        DateTime(timezone=True),
        server_default=func.now(),
        onupdate=func.now(),
        nullable=False,
    )

    user = relationship("User", back_populates="transactions")
