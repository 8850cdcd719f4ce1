import datetime

import pytest
from sqlalchemy import func, select

from moccam.db.models.database import Leaderboard, LessonProgress, UserActivityLog
from moccam.services.learning import progress as progress_module
from moccam.services.learning.progress import ProgressService

URL = "/api/v1/lessons/progress"


@pytest.fixture
async def lessons(seed):
    course = await seed.course()
    return [await seed.lesson(course.course_id, name=f"Chữ {i}") for i in range(1, 10)]


@pytest.fixture
def clock(monkeypatch):
    """Moves the progress service to a fixed day."""
    state = {"now": datetime.datetime(2024, 3, 1, 9, 0)}
    monkeypatch.setattr(progress_module, "get_now", lambda: state["now"])

    def set_day(offset: int):
        state["now"] = datetime.datetime(2024, 3, 1, 9, 0) + datetime.timedelta(days=offset)

    return set_day


async def _count(seed, model, **filters):
    stmt = select(func.count()).select_from(model)
    for key, value in filters.items():
        stmt = stmt.where(getattr(model, key) == value)
    return await seed.scalar(stmt)


async def test_first_completion_gives_base_points(client, headers, users, lessons, seed):
    res = await client.post(
        URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"}, headers=headers["customer"]
    )
    assert res.status_code == 200
    body = res.json()
    assert body["message"] == "✅ Lesson progress updated"
    assert body["points_awarded"] == 10
    assert body["streak_days"] == 1

    board = await seed.scalar(select(Leaderboard).where(Leaderboard.user_id == users["customer"].user_id))
    assert (board.total_points, board.streak_days) == (10, 1)
    assert await _count(seed, UserActivityLog, user_id=users["customer"].user_id) == 1


async def test_status_is_normalised_and_not_completed_awards_nothing(client, headers, users, lessons, seed):
    res = await client.post(
        URL, json={"lesson_id": lessons[0].lesson_id, "status": "  In_Progress "}, headers=headers["customer"]
    )
    assert res.status_code == 200
    assert res.json()["points_awarded"] == 0

    progress = await seed.scalar(select(LessonProgress))
    assert progress.status == "in_progress"
    assert await _count(seed, Leaderboard) == 0
    assert await _count(seed, UserActivityLog) == 0


async def test_resubmitting_keeps_single_progress_row(client, headers, users, lessons, seed):
    for status in ("in_progress", "in_progress", "completed"):
        res = await client.post(
            URL, json={"lesson_id": lessons[0].lesson_id, "status": status}, headers=headers["customer"]
        )
        assert res.status_code == 200

    assert await _count(seed, LessonProgress, user_id=users["customer"].user_id) == 1
    progress = await seed.scalar(select(LessonProgress))
    assert progress.status == "completed"


async def test_repeat_completion_is_not_rewarded(client, headers, users, lessons, seed):
    payload = {"lesson_id": lessons[0].lesson_id, "status": "completed"}
    await client.post(URL, json=payload, headers=headers["customer"])
    res = await client.post(URL, json=payload, headers=headers["customer"])

    assert res.json()["points_awarded"] == 0
    board = await seed.scalar(select(Leaderboard))
    assert board.total_points == 10


async def test_repeat_completion_rewarded_when_enabled(client, headers, lessons, seed, monkeypatch):
    monkeypatch.setattr(progress_module.settings, "AWARD_REPEAT_COMPLETIONS", True)
    payload = {"lesson_id": lessons[0].lesson_id, "status": "completed"}
    await client.post(URL, json=payload, headers=headers["customer"])
    await client.post(URL, json=payload, headers=headers["customer"])

    board = await seed.scalar(select(Leaderboard))
    assert board.total_points == 20
    assert board.streak_days == 1
    assert await _count(seed, UserActivityLog) == 1


async def test_seven_consecutive_days_total_eighty(client, headers, users, lessons, seed, clock):
    gains = []
    for day in range(7):
        clock(day)
        res = await client.post(
            URL, json={"lesson_id": lessons[day].lesson_id, "status": "completed"}, headers=headers["customer"]
        )
        assert res.status_code == 200
        gains.append(res.json()["points_awarded"])

    assert gains == [10, 10, 10, 10, 10, 10, 20]
    board = await seed.scalar(select(Leaderboard))
    assert (board.total_points, board.streak_days) == (80, 7)
    assert await _count(seed, UserActivityLog, user_id=users["customer"].user_id) == 7


async def test_missed_day_resets_streak(client, headers, lessons, seed, clock):
    for day, lesson in ((0, 0), (1, 1), (3, 2)):
        clock(day)
        await client.post(
            URL, json={"lesson_id": lessons[lesson].lesson_id, "status": "completed"}, headers=headers["customer"]
        )

    board = await seed.scalar(select(Leaderboard))
    assert (board.total_points, board.streak_days) == (30, 1)


async def test_second_lesson_same_day_keeps_streak(client, headers, lessons, seed, clock):
    clock(0)
    await client.post(URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"}, headers=headers["customer"])
    res = await client.post(
        URL, json={"lesson_id": lessons[1].lesson_id, "status": "completed"}, headers=headers["customer"]
    )

    assert res.json()["streak_days"] == 1
    board = await seed.scalar(select(Leaderboard))
    assert (board.total_points, board.streak_days) == (20, 1)
    assert await _count(seed, UserActivityLog) == 1


async def test_each_completion_after_active_yesterday_extends_streak(client, headers, lessons, seed, clock):
    clock(0)
    await client.post(URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"}, headers=headers["customer"])

    clock(1)
    streaks = []
    for lesson in lessons[1:3]:
        res = await client.post(
            URL, json={"lesson_id": lesson.lesson_id, "status": "completed"}, headers=headers["customer"]
        )
        streaks.append(res.json()["streak_days"])

    assert streaks == [2, 3]
    board = await seed.scalar(select(Leaderboard))
    assert (board.total_points, board.streak_days) == (30, 3)


async def test_invalid_status_rejected(client, headers, lessons):
    res = await client.post(
        URL, json={"lesson_id": lessons[0].lesson_id, "status": "done"}, headers=headers["customer"]
    )
    assert res.status_code == 400
    assert "message" in res.json()


async def test_unknown_lesson_rejected(client, headers, lessons):
    res = await client.post(URL, json={"lesson_id": 9999, "status": "completed"}, headers=headers["customer"])
    assert res.status_code == 400


async def test_only_customers_submit(client, headers, lessons):
    res = await client.post(
        URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"}, headers=headers["admin"]
    )
    assert res.status_code == 403


async def test_missing_token(client, lessons):
    res = await client.post(URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"})
    assert res.status_code == 401


async def test_failure_rolls_back_progress_row(client, headers, lessons, seed, monkeypatch):
    async def boom(self, user_id, current):
        raise RuntimeError("leaderboard unavailable")

    monkeypatch.setattr(ProgressService, "_award_completion_async", boom)
    res = await client.post(
        URL, json={"lesson_id": lessons[0].lesson_id, "status": "completed"}, headers=headers["customer"]
    )

    assert res.status_code == 500
    assert res.json()["message"] == "Server error"
    assert await _count(seed, LessonProgress) == 0
    assert await _count(seed, Leaderboard) == 0


class TestLessonProgressRouter:
    async def test_post_creates_with_201(self, client, headers, lessons):
        res = await client.post(
            "/api/v1/lesson-progress",
            json={"lesson_id": lessons[0].lesson_id, "status": "completed"},
            headers=headers["customer"],
        )
        assert res.status_code == 201
        assert res.json()["points_awarded"] == 10

    async def test_customer_lists_only_own(self, client, headers, users, lessons):
        await client.post(
            URL, json={"lesson_id": lessons[0].lesson_id, "status": "in_progress"}, headers=headers["customer"]
        )
        own = await client.get(f"/api/v1/lesson-progress/{users['customer'].user_id}", headers=headers["customer"])
        assert own.status_code == 200
        assert own.json()[0]["lesson_name"] == lessons[0].lesson_name

        other = await client.get(f"/api/v1/lesson-progress/{users['other'].user_id}", headers=headers["customer"])
        assert other.status_code == 403

        staff = await client.get("/api/v1/lesson-progress", headers=headers["employee"])
        assert staff.status_code == 200 and len(staff.json()) == 1

    async def test_update_and_delete_owner_checks(self, client, headers, lessons, seed):
        await client.post(
            URL, json={"lesson_id": lessons[0].lesson_id, "status": "in_progress"}, headers=headers["customer"]
        )
        progress = await seed.scalar(select(LessonProgress))

        forbidden = await client.put(
            f"/api/v1/lesson-progress/{progress.progress_id}", json={"status": "completed"}, headers=headers["other"]
        )
        assert forbidden.status_code == 403
        assert forbidden.json()["message"] == "You cannot edit someone else's progress"

        updated = await client.put(
            f"/api/v1/lesson-progress/{progress.progress_id}", json={"status": "completed"}, headers=headers["customer"]
        )
        assert updated.status_code == 200
        assert updated.json()["points_awarded"] == 10

        deleted = await client.delete(f"/api/v1/lesson-progress/{progress.progress_id}", headers=headers["customer"])
        assert deleted.status_code == 200
        missing = await client.delete(f"/api/v1/lesson-progress/{progress.progress_id}", headers=headers["customer"])
        assert missing.status_code == 404
        assert missing.json()["message"] == "Progress not found"
