from typing import Any, Dict, Optional

from pydantic import BaseModel


class CreatePaymentLink(BaseModel):
    plan_id: int
    voucher_id: Optional[int] = None


class PayOSWebhook(BaseModel):
    code: Optional[str] = None
    desc: Optional[str] = None
    success: Optional[bool] = None
    data: Dict[str, Any]
    signature: str
