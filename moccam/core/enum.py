from enum import Enum


class UserRole(str, Enum):
    """Vai trò tĩnh của tài khoản."""
    ADMIN = "admin"
    EMPLOYEE = "employee"
    CUSTOMER = "customer"


STAFF_ROLES = [UserRole.ADMIN.value, UserRole.EMPLOYEE.value]


class ProgressStatus(str, Enum):
    NOT_STARTED = "not_started"
    IN_PROGRESS = "in_progress"
    COMPLETED = "completed"


class PaymentStatus(str, Enum):
    PENDING = "pending"
    SUCCESS = "success"
    CANCELLED = "cancelled"
    FAILED = "failed"


class SubscriptionStatus(str, Enum):
    ACTIVE = "active"
    CANCELED = "canceled"
    EXPIRED = "expired"


class GatewayStatus(str, Enum):
    """Trạng thái PayOS trả về qua return url."""
    PAID = "PAID"
    CANCELLED = "CANCELLED"

    @staticmethod
    def to_payment_status(raw: str | None) -> PaymentStatus:
        value = (raw or "").upper()
        if value == GatewayStatus.PAID.value:
            return PaymentStatus.SUCCESS
        if value == GatewayStatus.CANCELLED.value:
            return PaymentStatus.CANCELLED
        return PaymentStatus.FAILED
