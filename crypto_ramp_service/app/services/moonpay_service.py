import hashlib
import hmac
import logging
from dataclasses import dataclass
from decimal import Decimal, InvalidOperation

import httpx
from pydantic import ValidationError

from crypto_ramp_service.app.core.config import Settings, settings
from crypto_ramp_service.app.core.errors import (
    ErrorCode,
    ErrorMessage,
    not_found,
    processor_error,
)
from crypto_ramp_service.app.schemas.moonpay import (
    RemoteStatus,
    RemoteTransaction,
    RemoteTransactionRequest,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class MoonPayConfig:
    api_key: str
    base_url: str = "https://api.moonpay.com"
    timeout: float = 30

    def __post_init__(self):
        object.__setattr__(self, "base_url", self.base_url.rstrip("/"))

    @classmethod
    def from_settings(cls, s: Settings) -> "MoonPayConfig":
        return cls(
            api_key=s.MOONPAY_API_KEY,
            base_url=str(s.MOONPAY_BASE_URL),
            timeout=s.MOONPAY_TIMEOUT_SECONDS,
        )


def _error_body(response: httpx.Response):
    try:
        return response.json()
    except ValueError:
        return response.text


def _json_body(response: httpx.Response) -> dict:
    try:
        data = response.json()
    except ValueError:
        raise processor_error("MoonPay returned a non-JSON response", response.text[:500])
    if not isinstance(data, dict):
        raise processor_error("MoonPay returned an unexpected response", data)
    return data


class MoonPayClient:
    """Thin wrapper over MoonPay's transaction endpoints. Holds no state between calls."""

    def __init__(self, config: MoonPayConfig, transport: httpx.AsyncBaseTransport | None = None):
        self.config = config
        self._transport = transport

    def _headers(self) -> dict:
        return {
            "X-API-KEY": self.config.api_key,
            "Content-Type": "application/json",
            "Accept": "application/json",
        }

    def _url(self, path: str) -> str:
        return f"{self.config.base_url}{path}"

    async def _send(self, method: str, path: str, json: dict | None = None) -> httpx.Response:
        try:
            async with httpx.AsyncClient(timeout=self.config.timeout, transport=self._transport) as client:
                return await client.request(method, self._url(path), json=json, headers=self._headers())
        except httpx.TimeoutException as e:
            raise processor_error("MoonPay request timed out", str(e)[:500])
        except httpx.RequestError as e:
            raise processor_error("MoonPay network error", str(e)[:500])

    async def create_remote_transaction(self, request: RemoteTransactionRequest) -> RemoteTransaction:
        response = await self._send("POST", "/v1/transactions", json=request.to_moonpay())

        if response.status_code < 200 or response.status_code >= 300:
            raise processor_error(f"MoonPay error {response.status_code}", _error_body(response))

        data = _json_body(response)
        if not data.get("id") or not data.get("status"):
            raise processor_error("MoonPay returned an incomplete transaction", data)

        try:
            remote = RemoteTransaction(
                external_id=data["id"],
                status=data["status"],
                redirect_url=data.get("redirectUrl"),
            )
        except ValidationError:
            raise processor_error("MoonPay returned a malformed transaction", data)

        logger.info(
            "MoonPay accepted transaction %s as %s (%s)",
            request.external_transaction_id,
            remote.external_id,
            remote.status,
        )
        return remote

    async def fetch_remote_transaction(self, external_id: str) -> RemoteStatus:
        response = await self._send("GET", f"/v1/transactions/{external_id}")

        if response.status_code == 404:
            raise not_found(ErrorCode.REMOTE_TRANSACTION_NOT_FOUND, ErrorMessage.REMOTE_TRANSACTION_NOT_FOUND)

        if response.status_code < 200 or response.status_code >= 300:
            raise processor_error(f"MoonPay verify error {response.status_code}", _error_body(response))

        data = _json_body(response)
        if not data.get("status"):
            raise processor_error("MoonPay returned a transaction without status", data)

        crypto_amount = data.get("cryptoAmount")
        try:
            return RemoteStatus(
                status=data["status"],
                crypto_amount=Decimal(str(crypto_amount)) if crypto_amount is not None else None,
            )
        except (ValidationError, InvalidOperation):
            raise processor_error("MoonPay returned a malformed transaction", data)


def verify_webhook_signature(payload: bytes, signature: str | None, key: str) -> bool:
    """
    Checks a ``Moonpay-Signature-V2`` header of the form ``t=<timestamp>,s=<hex digest>``.
    The digest is HMAC-SHA256 over ``"<timestamp>.<raw body>"``.
    """
    if not signature:
        return False

    parts = {}
    for item in signature.split(","):
        name, _, value = item.strip().partition("=")
        parts[name] = value

    timestamp = parts.get("t")
    received = parts.get("s")
    if not timestamp or not received:
        return False

    signed = timestamp.encode() + b"." + payload
    computed_signature = hmac.new(key.encode(), signed, hashlib.sha256).hexdigest()

    return hmac.compare_digest(computed_signature, received)


def get_moonpay_client() -> MoonPayClient:
    return MoonPayClient(MoonPayConfig.from_settings(settings))
