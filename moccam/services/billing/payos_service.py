from __future__ import annotations

import hashlib
import hmac
from typing import Any, Dict, Optional

import httpx
from fastapi import Request
from loguru import logger

from moccam.core.settings import settings


class PayOSError(RuntimeError):
    pass


class PayOSService:
    """
    Client PayOS:
    - Tạo link thanh toán (payment-requests) có chữ ký HMAC-SHA256
    - Xác thực chữ ký webhook
    Dùng chung httpx.AsyncClient của app (mở ở lifespan).
    """

    def __init__(self, http: httpx.AsyncClient, timeout: float = 30.0):
        self.http = http
        self.base_url = settings.PAYOS_BASE_URL.rstrip("/")
        self.client_id = settings.PAYOS_CLIENT_ID
        self.api_key = settings.PAYOS_API_KEY
        self.checksum_key = settings.PAYOS_CHECKSUM_KEY
        self.default_timeout = timeout

    # =========================================================
    # INTERNAL
    # =========================================================
    def _headers(self) -> Dict[str, str]:
        return {
            "x-client-id": self.client_id,
            "x-api-key": self.api_key,
            "Content-Type": "application/json",
        }

    def _sign(self, raw: str) -> str:
        return hmac.new(
            self.checksum_key.encode("utf-8"), raw.encode("utf-8"), hashlib.sha256
        ).hexdigest()

    def sign_payment_request(
        self,
        order_code: int,
        amount: int,
        description: str,
        cancel_url: str,
        return_url: str,
    ) -> str:
        # thứ tự khóa theo alphabet, đúng định dạng PayOS yêu cầu
        raw = (
            f"amount={amount}&cancelUrl={cancel_url}&description={description}"
            f"&orderCode={order_code}&returnUrl={return_url}"
        )
        return self._sign(raw)

    def sign_data(self, data: Dict[str, Any]) -> str:
        parts = []
        for key in sorted(data):
            value = data[key]
            if value is None:
                value = ""
            elif isinstance(value, bool):
                value = str(value).lower()
            parts.append(f"{key}={value}")
        return self._sign("&".join(parts))

    # =========================================================
    # PUBLIC
    # =========================================================
    async def create_payment_link(
        self,
        order_code: int,
        amount: int,
        description: str,
        return_url: Optional[str] = None,
        cancel_url: Optional[str] = None,
    ) -> Dict[str, Any]:
        """Trả về data của PayOS (checkoutUrl, paymentLinkId, ...)."""
        return_url = return_url or settings.PAYOS_RETURN_URL
        cancel_url = cancel_url or settings.PAYOS_CANCEL_URL
        body = {
            "orderCode": order_code,
            "amount": amount,
            "description": description,
            "returnUrl": return_url,
            "cancelUrl": cancel_url,
            "signature": self.sign_payment_request(
                order_code, amount, description, cancel_url, return_url
            ),
        }

        try:
            resp = await self.http.post(
                f"{self.base_url}/v2/payment-requests",
                json=body,
                headers=self._headers(),
                timeout=self.default_timeout,
            )
        except httpx.HTTPError as e:
            raise PayOSError(f"Không kết nối được PayOS: {e}") from e

        if resp.status_code != 200:
            raise PayOSError(f"PayOS lỗi: {resp.status_code} {resp.text}")

        payload = resp.json()
        if payload.get("code") != "00" or not (payload.get("data") or {}).get("checkoutUrl"):
            raise PayOSError(f"PayOS từ chối tạo link: {payload.get('desc')}")

        logger.info(f"[PayOS][Create] orderCode={order_code} amount={amount}")
        return payload["data"]

    def verify_webhook(self, data: Dict[str, Any], signature: str) -> bool:
        return hmac.compare_digest(self.sign_data(data), signature or "")


def get_payos_service(request: Request) -> PayOSService:
    return PayOSService(request.app.state.http)
