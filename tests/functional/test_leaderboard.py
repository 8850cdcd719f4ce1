import datetime

from moccam.db.models.database import Leaderboard, User


async def _board(seed, user, points, streak, days_ago=0):
    return await seed.add(
        Leaderboard(
            user_id=user.user_id,
            total_points=points,
            streak_days=streak,
            last_updated=datetime.datetime(2024, 5, 10) - datetime.timedelta(days=days_ago),
        )
    )


async def test_top_ordering(client, users, seed):
    await _board(seed, users["customer"], 50, 2)
    await _board(seed, users["other"], 50, 5)
    await _board(seed, users["employee"], 90, 1)

    res = await client.get("/api/v1/leaderboard")
    assert res.status_code == 200
    names = [row["full_name"] for row in res.json()]
    assert names == ["Nhân viên", "Trần Bình", "Nguyễn An"]


async def test_top_is_limited_to_ten(client, users, seed):
    extra = [
        User(email=f"u{i}@moccam.vn", password="x", full_name=f"U{i}", role="customer")
        for i in range(12)
    ]
    await seed.add(*extra)
    for i, user in enumerate(extra):
        await _board(seed, user, i, 0)

    res = await client.get("/api/v1/leaderboard")
    assert len(res.json()) == 10
    assert res.json()[0]["total_points"] == 11


async def test_customer_cannot_read_other_row(client, users, headers, seed):
    await _board(seed, users["other"], 10, 1)
    res = await client.get(f"/api/v1/leaderboard/{users['other'].user_id}", headers=headers["customer"])
    assert res.status_code == 403
    assert res.json()["message"] == "You can only view your own leaderboard info"


async def test_admin_reads_any_row(client, users, headers, seed):
    await _board(seed, users["other"], 10, 1)
    res = await client.get(f"/api/v1/leaderboard/{users['other'].user_id}", headers=headers["admin"])
    assert res.status_code == 200
    assert res.json()["total_points"] == 10


async def test_own_row_missing(client, users, headers):
    res = await client.get(f"/api/v1/leaderboard/{users['customer'].user_id}", headers=headers["customer"])
    assert res.status_code == 404
    assert res.json()["message"] == "User not found in leaderboard"
