from decimal import Decimal
from typing import Annotated, Literal, Optional, Union

from pydantic import BaseModel, Field


class MobileMoney(BaseModel):
    kind: Literal["mobile_money"] = "mobile_money"

    def to_moonpay(self) -> dict:
        return {"paymentMethod": "mobile_money"}


class Card(BaseModel):
    number: str
    expiry_month: str
    expiry_year: str
    cvv: str
    holder_name: str


class CardPayment(BaseModel):
    kind: Literal["card_payment"] = "card_payment"
    card: Card

    def to_moonpay(self) -> dict:
        return {
            "paymentMethod": "credit_debit_card",
            "card": {
                "number": self.card.number,
                "expirationMonth": self.card.expiry_month,
                "expirationYear": self.card.expiry_year,
                "cvc": self.card.cvv,
                "cardholderName": self.card.holder_name,
            },
        }


PaymentMethod = Annotated[Union[MobileMoney, CardPayment], Field(discriminator="kind")]


class Customer(BaseModel):
    id: int
    first_name: str
    last_name: str
    email: str
    phone: Optional[str] = None

    def to_moonpay(self) -> dict:
        return {
            "firstName": self.first_name,
            "lastName": self.last_name,
            "email": self.email,
            "phoneNumber": self.phone,
            "externalCustomerId": str(self.id),
        }


class RemoteTransactionRequest(BaseModel):
    wallet_address: str
    crypto_currency: str
    amount: Decimal
    currency: str
    # Local transaction id, used by MoonPay as the correlation key
    external_transaction_id: str
    customer: Customer
    payment: PaymentMethod

    def to_moonpay(self) -> dict:
        payload = {
            "walletAddress": self.wallet_address,
            "currencyCode": self.crypto_currency,
            "baseCurrencyAmount": float(self.amount),
            "baseCurrencyCode": self.currency,
            "externalTransactionId": self.external_transaction_id,
            "customer": self.customer.to_moonpay(),
        }
        payload.update(self.payment.to_moonpay())
        return payload


class RemoteTransaction(BaseModel):
    external_id: str
    status: str
    redirect_url: Optional[str] = None


class RemoteStatus(BaseModel):
    status: str
    crypto_amount: Optional[Decimal] = None
