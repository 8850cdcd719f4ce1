import decimal
from urllib.parse import urlencode

from fastapi import Depends, HTTPException
from fastapi.responses import RedirectResponse
from loguru import logger
from sqlalchemy import select, update
from sqlalchemy.ext.asyncio import AsyncSession

from moccam.core.deps import AuthorizationService
from moccam.core.enum import GatewayStatus, PaymentStatus
from moccam.core.settings import settings
from moccam.db.models.database import Payments, SubscriptionPlans, User, Vouchers
from moccam.db.session import get_session
from moccam.db.uow import transaction
from moccam.libs.formats.datetime import epoch_millis
from moccam.libs.formats.datetime import now as get_now
from moccam.schemas.billing.payment import CreatePaymentLink, PayOSWebhook
from moccam.schemas.shares.notification import NotificationCreateSchema
from moccam.services.billing.payos_service import PayOSError, PayOSService, get_payos_service
from moccam.services.billing.user_subscription import UserSubscriptionService
from moccam.services.billing.voucher import ensure_voucher_usable
from moccam.services.shares.notification import NotificationService

PAYMENT_METHOD = "PayOS"
# PayOS giới hạn mô tả 25 ký tự
DESCRIPTION_MAX_LENGTH = 25


def compute_final_amount(price, discount) -> decimal.Decimal:
    """final = max(0, price - discount)."""
    price = decimal.Decimal(price or 0)
    discount = decimal.Decimal(discount or 0)
    return max(decimal.Decimal(0), price - discount)


class PaymentService:
    def __init__(
        self,
        db: AsyncSession = Depends(get_session),
        payos: PayOSService = Depends(get_payos_service),
        subscriptions: UserSubscriptionService = Depends(UserSubscriptionService),
        notifications: NotificationService = Depends(NotificationService),
    ):
        self.db = db
        self.payos = payos
        self.subscriptions = subscriptions
        self.notifications = notifications

    # ==========================================================================
    # 💳 Tạo link thanh toán
    # ==========================================================================
    async def create_payment_link_async(self, schema: CreatePaymentLink, user: User):
        """
        ✅ Tạo link PayOS cho gói đăng ký:
        - Gói phải tồn tại và đang active.
        - Voucher (nếu có) phải trong thời hạn và còn lượt.
        - Số tiền cuối = max(0, giá - giảm); <= 0 bị từ chối.
        - Chỉ lưu Payment (pending) khi PayOS trả về checkoutUrl.
        """
        try:
            # 1️⃣ Gói đăng ký
            plan = await self.db.scalar(
                select(SubscriptionPlans).where(
                    SubscriptionPlans.plan_id == schema.plan_id,
                    SubscriptionPlans.is_active.is_(True),
                )
            )
            if not plan:
                raise HTTPException(404, "Subscription plan not found or inactive.")

            # 2️⃣ Voucher
            discount = decimal.Decimal(0)
            if schema.voucher_id is not None:
                voucher = await self.db.get(Vouchers, schema.voucher_id)
                if not voucher:
                    raise HTTPException(404, "Voucher not found.")
                ensure_voucher_usable(voucher)
                discount = decimal.Decimal(voucher.discount_value)

            # 3️⃣ Số tiền
            original = decimal.Decimal(plan.price)
            final_amount = compute_final_amount(original, discount)
            if final_amount <= 0:
                raise HTTPException(400, "Số tiền thanh toán phải lớn hơn 0.")

            # 4️⃣ Mã đơn = epoch millis (tránh trùng nếu đã có)
            order_code = epoch_millis()
            while await self.db.scalar(
                select(Payments.payment_id).where(Payments.transaction_id == str(order_code))
            ):
                order_code += 1

            description = f"Thanh toán {plan.plan_name}"[:DESCRIPTION_MAX_LENGTH]

            # 5️⃣ Gọi PayOS
            try:
                link = await self.payos.create_payment_link(
                    order_code=order_code,
                    amount=int(final_amount),
                    description=description,
                )
            except PayOSError as e:
                logger.error(f"[Payments][PayOS] orderCode={order_code}: {e}")
                raise HTTPException(502, "Không tạo được link thanh toán PayOS.")

            # 6️⃣ Lưu payment pending
            current = get_now()
            self.db.add(
                Payments(
                    user_id=user.user_id,
                    plan_id=plan.plan_id,
                    voucher_id=schema.voucher_id,
                    original_amount=original,
                    discount_amount=min(discount, original),
                    final_amount=final_amount,
                    description=description,
                    status=PaymentStatus.PENDING.value,
                    payment_method=PAYMENT_METHOD,
                    transaction_id=str(order_code),
                    created_at=current,
                    updated_at=current,
                )
            )
            await self.db.commit()
            logger.info(f"[Payments][Create] user={user.user_id} orderCode={order_code}")

            return {
                "message": "Tạo link thanh toán thành công",
                "checkoutUrl": link["checkoutUrl"],
                "orderCode": order_code,
            }
        except HTTPException:
            raise
        except Exception as e:
            await self.db.rollback()
            logger.exception(f"[Payments][Create] {e}")
            raise HTTPException(500, "Lỗi máy chủ khi tạo thanh toán.")

    # ==========================================================================
    # 🔁 Đối soát
    # ==========================================================================
    async def reconcile_async(self, order_code, gateway_status: str | None) -> Payments:
        """
        ✅ Đối soát 1 đơn PayOS trong một transaction:
        - Cập nhật trạng thái (PAID→success, CANCELLED→cancelled, khác→failed).
        - Lần đầu chuyển sang success: +1 used_count voucher, kích hoạt gói, gửi thông báo.
        - Đơn đã success thì không xử lý lại.
        """
        if order_code in (None, ""):
            raise HTTPException(400, "Thiếu orderCode.")

        new_status = GatewayStatus.to_payment_status(gateway_status)

        try:
            async with transaction(self.db):
                payment = await self.db.scalar(
                    select(Payments)
                    .where(Payments.transaction_id == str(order_code))
                    .with_for_update()
                )
                if not payment:
                    raise HTTPException(404, "Không tìm thấy giao dịch.")

                if payment.status == PaymentStatus.SUCCESS.value:
                    logger.info(f"[Payments][Reconcile] orderCode={order_code} đã xử lý")
                    return payment

                payment.status = new_status.value
                payment.updated_at = get_now()

                if new_status == PaymentStatus.SUCCESS:
                    await self._on_success_async(payment)

            logger.info(f"[Payments][Reconcile] orderCode={order_code} → {payment.status}")
            return payment
        except HTTPException:
            raise
        except Exception as e:
            logger.exception(f"[Payments][Reconcile] orderCode={order_code}: {e}")
            raise HTTPException(500, "Lỗi máy chủ khi đối soát thanh toán.")

    async def _on_success_async(self, payment: Payments):
        # 1️⃣ Voucher: chỉ tăng khi còn lượt
        if payment.voucher_id is not None:
            result = await self.db.execute(
                update(Vouchers)
                .where(
                    Vouchers.voucher_id == payment.voucher_id,
                    Vouchers.used_count < Vouchers.max_usage,
                )
                .values(used_count=Vouchers.used_count + 1)
            )
            if not result.rowcount:
                logger.warning(
                    f"[Payments][Voucher] voucher={payment.voucher_id} đã hết lượt khi đối soát"
                )

        # 2️⃣ Kích hoạt gói
        plan = await self.db.get(SubscriptionPlans, payment.plan_id)
        if plan:
            await self.subscriptions.activate_async(payment.user_id, plan)

        # 3️⃣ Thông báo
        await self.notifications.create_notification_async(
            NotificationCreateSchema(
                user_id=payment.user_id,
                title="Thanh toán thành công",
                message=f"Bạn đã thanh toán {payment.final_amount} VND cho "
                f"{plan.plan_name if plan else 'gói đăng ký'}.",
                type="payment",
            ),
            commit=False,
        )

    async def handle_return_async(self, order_code, gateway_status: str | None):
        payment = await self.reconcile_async(order_code, gateway_status)
        query = urlencode({"status": payment.status, "orderCode": payment.transaction_id})
        return RedirectResponse(
            f"{settings.FRONTEND_URL.rstrip('/')}/payment-result?{query}", status_code=302
        )

    async def handle_webhook_async(self, body: PayOSWebhook):
        if not self.payos.verify_webhook(body.data, body.signature):
            raise HTTPException(400, "Chữ ký webhook không hợp lệ.")

        gateway_status = (
            GatewayStatus.PAID.value if body.data.get("code") == "00" else body.data.get("status")
        )
        payment = await self.reconcile_async(body.data.get("orderCode"), gateway_status)
        return {"success": True, "orderCode": payment.transaction_id, "status": payment.status}

    # ==========================================================================
    # 📋 Danh sách thanh toán
    # ==========================================================================
    async def get_payments_async(self, user: User):
        stmt = (
            select(Payments, User.full_name, SubscriptionPlans.plan_name)
            .join(User, User.user_id == Payments.user_id)
            .join(SubscriptionPlans, SubscriptionPlans.plan_id == Payments.plan_id)
            .order_by(Payments.created_at.desc(), Payments.payment_id.desc())
        )
        if not AuthorizationService.is_staff(user):
            stmt = stmt.where(Payments.user_id == user.user_id)

        rows = (await self.db.execute(stmt)).all()
        return [
            {
                "payment_id": p.payment_id,
                "user_id": p.user_id,
                "full_name": full_name,
                "plan_id": p.plan_id,
                "plan_name": plan_name,
                "voucher_id": p.voucher_id,
                "original_amount": p.original_amount,
                "discount_amount": p.discount_amount,
                "final_amount": p.final_amount,
                "status": p.status,
                "payment_method": p.payment_method,
                "transaction_id": p.transaction_id,
                "created_at": p.created_at,
                "updated_at": p.updated_at,
            }
            for p, full_name, plan_name in rows
        ]
