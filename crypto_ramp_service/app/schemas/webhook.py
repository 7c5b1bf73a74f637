from decimal import Decimal
from typing import Optional

from pydantic import BaseModel, ConfigDict


class MoonPayWebhookData(BaseModel):
    model_config = ConfigDict(extra="ignore")

    id: str
    status: str
    cryptoAmount: Optional[Decimal] = None


class MoonPayWebhook(BaseModel):
    model_config = ConfigDict(extra="ignore")

    type: Optional[str] = None
    data: MoonPayWebhookData
