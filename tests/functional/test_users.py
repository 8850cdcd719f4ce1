from moccam.db.models.database import Comments, User


async def test_listing_is_admin_only(client, headers):
    assert (await client.get("/api/v1/users", headers=headers["employee"])).status_code == 403

    res = await client.get("/api/v1/users", headers=headers["admin"])
    assert len(res.json()) == 4
    assert all("password" not in u for u in res.json())


async def test_customer_reads_only_self(client, headers, users):
    own = await client.get(f"/api/v1/users/{users['customer'].user_id}", headers=headers["customer"])
    assert own.status_code == 200
    other = await client.get(f"/api/v1/users/{users['other'].user_id}", headers=headers["customer"])
    assert other.status_code == 403


async def test_employee_creates_customers_only(client, headers):
    body = {"email": "hv@moccam.vn", "password": "matkhau1", "full_name": "Học viên"}
    assert (await client.post("/api/v1/users/create", json=body, headers=headers["employee"])).status_code == 201

    staff = {**body, "email": "nv2@moccam.vn", "role": "employee"}
    assert (await client.post("/api/v1/users/create", json=staff, headers=headers["employee"])).status_code == 403
    assert (await client.post("/api/v1/users/create", json=staff, headers=headers["admin"])).status_code == 201


class TestUpdate:
    async def test_customer_edits_self_but_not_role(self, client, headers, users, seed):
        user_id = users["customer"].user_id
        res = await client.put(f"/api/v1/users/{user_id}", json={"full_name": "An Nguyễn"}, headers=headers["customer"])
        assert res.status_code == 200
        assert res.json()["user"]["full_name"] == "An Nguyễn"

        role = await client.put(f"/api/v1/users/{user_id}", json={"role": "admin"}, headers=headers["customer"])
        assert role.status_code == 403

        other = await client.put(
            f"/api/v1/users/{users['other'].user_id}", json={"full_name": "X"}, headers=headers["customer"]
        )
        assert other.status_code == 403
        assert (await seed.get(User, users["other"].user_id)).full_name == "Trần Bình"

    async def test_password_is_rehashed(self, client, headers, users):
        user_id = users["customer"].user_id
        await client.put(f"/api/v1/users/{user_id}", json={"password": "moimoi99"}, headers=headers["customer"])

        res = await client.post("/api/v1/auth/login", json={"email": "an@moccam.vn", "password": "moimoi99"})
        assert res.status_code == 200

    async def test_duplicate_email(self, client, headers, users):
        res = await client.put(
            f"/api/v1/users/{users['customer'].user_id}", json={"email": "binh@moccam.vn"}, headers=headers["admin"]
        )
        assert res.status_code == 400


async def test_delete_blocked_by_comments(client, headers, users, seed):
    course = await seed.course()
    lesson = await seed.lesson(course.course_id)
    await seed.add(Comments(user_id=users["customer"].user_id, lesson_id=lesson.lesson_id, comment="Ok", rate=3))

    blocked = await client.delete(f"/api/v1/users/{users['customer'].user_id}", headers=headers["admin"])
    assert blocked.status_code == 400
    assert "bình luận" in blocked.json()["reason"]

    ok = await client.delete(f"/api/v1/users/{users['other'].user_id}", headers=headers["admin"])
    assert ok.status_code == 200
