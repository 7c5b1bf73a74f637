from datetime import datetime
from decimal import Decimal
from typing import Literal, Optional

from pydantic import BaseModel, Field, model_validator

from crypto_ramp_service.app.models.transaction import AMOUNT_DIGITS, AMOUNT_PLACES
from crypto_ramp_service.app.schemas.moonpay import (
    Card,
    CardPayment,
    MobileMoney,
    PaymentMethod,
)


class CardDetails(BaseModel):
    cardNumber: str = Field(min_length=12, max_length=19)
    expiryMonth: str = Field(min_length=1, max_length=2)
    expiryYear: str = Field(min_length=2, max_length=4)
    cvv: str = Field(min_length=3, max_length=4)
    cardholderName: str = Field(min_length=1)


class UserDetails(BaseModel):
    walletAddress: str = Field(min_length=1)


class TransactionCreate(BaseModel):
    userId: int
    amount: Decimal = Field(gt=0, max_digits=AMOUNT_DIGITS, decimal_places=AMOUNT_PLACES)
    currency: str = Field(min_length=3, max_length=10)
    cryptoCurrency: str = Field(min_length=1, max_length=20)
    paymentMethod: Literal["mobile_money", "card_payment"]
    cardDetails: Optional[CardDetails] = None
    userDetails: UserDetails

    @model_validator(mode="after")
    def card_details_for_card_payment(self):
        if self.paymentMethod == "card_payment" and self.cardDetails is None:
            raise ValueError("cardDetails is required for card_payment")
        return self

    def payment(self) -> PaymentMethod:
        if self.paymentMethod == "card_payment":
            return CardPayment(
                card=Card(
                    number=self.cardDetails.cardNumber,
                    expiry_month=self.cardDetails.expiryMonth,
                    expiry_year=self.cardDetails.expiryYear,
                    cvv=self.cardDetails.cvv,
                    holder_name=self.cardDetails.cardholderName,
                )
            )
        return MobileMoney()


class TransactionOut(BaseModel):
    id: int
    userId: int
    amount: float
    currency: str
    cryptoAmount: Optional[float] = None
    cryptoCurrency: str
    status: str
    paymentMethod: str
    moonpayTransactionId: Optional[str] = None
    createdAt: Optional[datetime] = None
    updatedAt: Optional[datetime] = None

    @classmethod
    def from_model(cls, txn) -> "TransactionOut":
        return cls(
            id=txn.id,
            userId=txn.user_id,
            amount=float(txn.amount),
            currency=txn.currency,
            cryptoAmount=float(txn.crypto_amount) if txn.crypto_amount is not None else None,
            cryptoCurrency=txn.crypto_currency,
            status=txn.status,
            paymentMethod=txn.payment_method,
            moonpayTransactionId=txn.moonpay_transaction_id,
            createdAt=txn.created_at,
            updatedAt=txn.updated_at,
        )


class TransactionCreated(BaseModel):
    transaction: TransactionOut
    moonpayUrl: Optional[str] = None
