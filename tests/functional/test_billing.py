import datetime

from sqlalchemy import select

from moccam.core.enum import SubscriptionStatus
from moccam.db.models.database import Payments, UserSubscriptions, Vouchers
from moccam.libs.formats.datetime import now as get_now


class TestVouchers:
    async def test_create_generates_code(self, client, headers, seed, users):
        current = get_now()
        res = await client.post(
            "/api/v1/vouchers/create",
            json={
                "description": "Khai giảng",
                "discount_value": "15000",
                "max_usage": 3,
                "start_date": (current - datetime.timedelta(days=1)).isoformat(),
                "end_date": (current + datetime.timedelta(days=1)).isoformat(),
            },
            headers=headers["employee"],
        )
        assert res.status_code == 201
        code = res.json()["code"]
        assert len(code) == 10 and code == code.upper()

        voucher = await seed.scalar(select(Vouchers).where(Vouchers.code == code))
        assert voucher.used_count == 0
        assert voucher.created_by == users["employee"].user_id

        checked = await client.get(f"/api/v1/vouchers/check/{code.lower()}", headers=headers["customer"])
        assert checked.status_code == 200

    async def test_create_rejects_inverted_window(self, client, headers):
        current = get_now()
        res = await client.post(
            "/api/v1/vouchers/create",
            json={
                "description": "Sai",
                "discount_value": "1000",
                "max_usage": 1,
                "start_date": current.isoformat(),
                "end_date": (current - datetime.timedelta(days=1)).isoformat(),
            },
            headers=headers["admin"],
        )
        assert res.status_code == 400

    async def test_check_reports_reason(self, client, headers, seed):
        await seed.voucher(code="USEDUP0001", max_usage=1, used_count=1)
        await seed.voucher(code="EXPIRED001", starts_in_days=-5, ends_in_days=-1)

        assert (await client.get("/api/v1/vouchers/check/NOPE", headers=headers["customer"])).status_code == 404
        used = await client.get("/api/v1/vouchers/check/USEDUP0001", headers=headers["customer"])
        assert used.json()["message"] == "Voucher đã hết lượt sử dụng"
        expired = await client.get("/api/v1/vouchers/check/EXPIRED001", headers=headers["customer"])
        assert expired.json()["message"] == "Voucher chưa đến hạn hoặc đã hết hạn"

    async def test_update_cannot_drop_below_used_count(self, client, headers, seed):
        voucher = await seed.voucher(max_usage=5, used_count=3)
        res = await client.put(
            f"/api/v1/vouchers/{voucher.voucher_id}", json={"max_usage": 2}, headers=headers["admin"]
        )
        assert res.status_code == 400

        ok = await client.put(
            f"/api/v1/vouchers/{voucher.voucher_id}", json={"max_usage": 8}, headers=headers["admin"]
        )
        assert ok.json()["max_usage"] == 8

    async def test_listing_is_staff_only(self, client, headers):
        assert (await client.get("/api/v1/vouchers", headers=headers["customer"])).status_code == 403
        assert (await client.get("/api/v1/vouchers", headers=headers["employee"])).status_code == 200


class TestPlans:
    async def test_inactive_plan_hidden_from_customers(self, client, headers, seed):
        await seed.plan(price="200000", name="Gói năm")
        hidden = await seed.plan(price="50000", active=False, name="Gói cũ")

        public = await client.get("/api/v1/subscription-plans")
        assert [p["plan_name"] for p in public.json()] == ["Gói năm"]

        assert (await client.get(f"/api/v1/subscription-plans/{hidden.plan_id}", headers=headers["customer"])).status_code == 404
        assert (await client.get(f"/api/v1/subscription-plans/{hidden.plan_id}", headers=headers["employee"])).status_code == 200

        everything = await client.get("/api/v1/subscription-plans/all", headers=headers["admin"])
        assert [p["plan_name"] for p in everything.json()] == ["Gói cũ", "Gói năm"]

    async def test_plan_with_subscriptions_cannot_be_deleted(self, client, headers, seed, users):
        plan = await seed.plan()
        current = get_now()
        await seed.add(
            UserSubscriptions(
                user_id=users["customer"].user_id,
                plan_id=plan.plan_id,
                start_date=current,
                end_date=current + datetime.timedelta(days=30),
                status=SubscriptionStatus.ACTIVE.value,
                created_at=current,
            )
        )
        res = await client.delete(f"/api/v1/subscription-plans/{plan.plan_id}", headers=headers["admin"])
        assert res.status_code == 400
        assert res.json()["message"] == "Không thể xóa gói đăng ký này."

    async def test_partial_update_keeps_other_fields(self, client, headers, seed):
        plan = await seed.plan(price="100000", duration=30)
        res = await client.put(
            f"/api/v1/subscription-plans/{plan.plan_id}", json={"is_active": False}, headers=headers["admin"]
        )
        body = res.json()
        assert body["is_active"] is False
        assert body["duration_in_days"] == 30

        empty = await client.put(f"/api/v1/subscription-plans/{plan.plan_id}", json={}, headers=headers["admin"])
        assert empty.status_code == 400


class TestUserSubscriptions:
    async def test_staff_grant_then_duplicate_rejected(self, client, headers, seed, users):
        plan = await seed.plan(duration=7)
        body = {"user_id": users["customer"].user_id, "plan_id": plan.plan_id}

        first = await client.post("/api/v1/user-subscriptions/create", json=body, headers=headers["employee"])
        assert first.status_code == 201
        second = await client.post("/api/v1/user-subscriptions/create", json=body, headers=headers["employee"])
        assert second.status_code == 400

        sub = await seed.get(UserSubscriptions, first.json()["user_subscription_id"])
        assert sub.end_date - sub.start_date == datetime.timedelta(days=7)

    async def test_customer_sees_only_own(self, client, headers, seed, users):
        plan = await seed.plan()
        for user in (users["customer"], users["other"]):
            await client.post(
                "/api/v1/user-subscriptions/create",
                json={"user_id": user.user_id, "plan_id": plan.plan_id},
                headers=headers["admin"],
            )

        mine = await client.get("/api/v1/user-subscriptions", headers=headers["customer"])
        assert [s["full_name"] for s in mine.json()] == ["Nguyễn An"]

        res = await client.get(f"/api/v1/user-subscriptions/user/{users['other'].user_id}", headers=headers["customer"])
        assert res.status_code == 403

    async def test_cancel_only_active(self, client, headers, seed, users):
        plan = await seed.plan()
        created = await client.post(
            "/api/v1/user-subscriptions/create",
            json={"user_id": users["customer"].user_id, "plan_id": plan.plan_id},
            headers=headers["admin"],
        )
        sub_id = created.json()["user_subscription_id"]

        assert (await client.put(f"/api/v1/user-subscriptions/{sub_id}/cancel", headers=headers["other"])).status_code == 403
        assert (await client.put(f"/api/v1/user-subscriptions/{sub_id}/cancel", headers=headers["customer"])).status_code == 200
        again = await client.put(f"/api/v1/user-subscriptions/{sub_id}/cancel", headers=headers["customer"])
        assert again.status_code == 400

        sub = await seed.get(UserSubscriptions, sub_id)
        assert sub.status == SubscriptionStatus.CANCELED.value


async def test_voucher_with_payments_cannot_be_deleted(client, headers, seed, users):
    voucher = await seed.voucher()
    plan = await seed.plan()
    await seed.add(
        Payments(
            user_id=users["customer"].user_id,
            plan_id=plan.plan_id,
            voucher_id=voucher.voucher_id,
            original_amount=plan.price,
            discount_amount=voucher.discount_value,
            final_amount=plan.price - voucher.discount_value,
            status="pending",
            transaction_id="1700000000000",
            created_at=get_now(),
        )
    )
    res = await client.delete(f"/api/v1/vouchers/{voucher.voucher_id}", headers=headers["admin"])
    assert res.status_code == 400
