import decimal
from typing import Annotated, Optional

from pydantic import BaseModel, Field


class CreatePlan(BaseModel):
    plan_name: Annotated[str, Field(min_length=1, max_length=255)]
    price: Annotated[decimal.Decimal, Field(ge=0)]
    duration_in_days: Annotated[int, Field(gt=0)]
    description: Optional[str] = None
    currency: str = "VND"
    is_active: bool = True


class UpdatePlan(BaseModel):
    plan_name: Optional[Annotated[str, Field(min_length=1, max_length=255)]] = None
    price: Optional[Annotated[decimal.Decimal, Field(ge=0)]] = None
    duration_in_days: Optional[Annotated[int, Field(gt=0)]] = None
    description: Optional[str] = None
    currency: Optional[str] = None
    is_active: Optional[bool] = None


class CreateUserSubscription(BaseModel):
    """Nhân viên cấp gói thủ công cho user."""

    user_id: int
    plan_id: int
