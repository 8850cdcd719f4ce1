from moccam.db.models.database import Comments, HandMotions, Resources
from moccam.libs.formats.datetime import now as get_now


async def test_course_crud_by_staff(client, headers, users):
    created = await client.post(
        "/api/v1/courses/create",
        json={"course_name": "Chào hỏi", "level": "A1", "is_free": True},
        headers=headers["employee"],
    )
    assert created.status_code == 201
    course = created.json()
    assert course["created_by"] == users["employee"].user_id

    updated = await client.put(
        f"/api/v1/courses/{course['course_id']}", json={"description": "Các câu chào"}, headers=headers["admin"]
    )
    assert updated.json()["description"] == "Các câu chào"
    assert updated.json()["level"] == "A1"

    listing = await client.get("/api/v1/courses")
    assert listing.json()[0]["lesson_count"] == 0

    assert (await client.post(
        "/api/v1/courses/create", json={"course_name": "X"}, headers=headers["customer"]
    )).status_code == 403


async def test_course_with_lessons_cannot_be_deleted(client, headers, seed):
    course = await seed.course()
    await seed.lesson(course.course_id)

    res = await client.delete(f"/api/v1/courses/{course.course_id}", headers=headers["admin"])
    assert res.status_code == 400
    assert res.json()["message"] == "Không thể xóa khóa học này."
    assert "bài học" in res.json()["reason"]


async def test_empty_course_deleted(client, headers, seed):
    course = await seed.course()
    assert (await client.delete(f"/api/v1/courses/{course.course_id}", headers=headers["admin"])).status_code == 200
    assert (await client.get(f"/api/v1/courses/{course.course_id}")).status_code == 404


async def test_lesson_requires_existing_course(client, headers, seed):
    res = await client.post(
        "/api/v1/lessons/create", json={"course_id": 404, "lesson_name": "Chữ B"}, headers=headers["admin"]
    )
    assert res.status_code == 400

    course = await seed.course()
    ok = await client.post(
        "/api/v1/lessons/create",
        json={"course_id": course.course_id, "lesson_name": "Chữ B"},
        headers=headers["admin"],
    )
    assert ok.status_code == 201
    by_course = await client.get(f"/api/v1/lessons/course/{course.course_id}", headers=headers["customer"])
    assert [lesson["lesson_name"] for lesson in by_course.json()] == ["Chữ B"]


async def test_lesson_delete_blocked_by_dependents(client, headers, seed, users):
    course = await seed.course()
    lesson = await seed.lesson(course.course_id)
    await seed.add(Resources(lesson_id=lesson.lesson_id, title="PDF", created_at=get_now()))
    await seed.add(
        Comments(user_id=users["customer"].user_id, lesson_id=lesson.lesson_id, comment="Hay", rate=5)
    )

    res = await client.delete(f"/api/v1/lessons/{lesson.lesson_id}", headers=headers["admin"])
    assert res.status_code == 400
    assert "tài liệu" in res.json()["reason"]
    assert "bình luận" in res.json()["reason"]


async def test_ai_model_referenced_by_motion_cannot_be_deleted(client, headers, seed):
    course = await seed.course()
    lesson = await seed.lesson(course.course_id)
    model = await seed.ai_model()
    await seed.add(HandMotions(lesson_id=lesson.lesson_id, model_id=model.model_id, motion_data="[]"))

    res = await client.delete(f"/api/v1/ai-models/{model.model_id}", headers=headers["admin"])
    assert res.status_code == 400
    assert res.json()["message"] == "Không thể xóa mô hình AI này."


async def test_hand_motion_checks_references(client, headers, seed):
    course = await seed.course()
    lesson = await seed.lesson(course.course_id)
    model = await seed.ai_model()

    bad = await client.post(
        "/api/v1/hand-motions/create",
        json={"lesson_id": lesson.lesson_id, "model_id": 999, "motion_data": "[1,2]"},
        headers=headers["employee"],
    )
    assert bad.status_code == 400

    ok = await client.post(
        "/api/v1/hand-motions/create",
        json={"lesson_id": lesson.lesson_id, "model_id": model.model_id, "motion_data": "[1,2]"},
        headers=headers["employee"],
    )
    assert ok.status_code == 201
    listing = await client.get("/api/v1/hand-motions", params={"lesson_id": lesson.lesson_id})
    assert len(listing.json()) == 1


async def test_resource_crud(client, headers, seed):
    course = await seed.course()
    lesson = await seed.lesson(course.course_id)
    created = await client.post(
        "/api/v1/resources/create",
        json={"lesson_id": lesson.lesson_id, "title": "Slide", "resource_type": "pdf"},
        headers=headers["employee"],
    )
    resource_id = created.json()["resource_id"]
    updated = await client.put(
        f"/api/v1/resources/{resource_id}", json={"url": "https://cdn/slide.pdf"}, headers=headers["employee"]
    )
    assert updated.json()["title"] == "Slide"
    assert (await client.delete(f"/api/v1/resources/{resource_id}", headers=headers["employee"])).status_code == 200


class TestComments:
    async def test_rate_must_be_between_one_and_five(self, client, headers, seed):
        course = await seed.course()
        lesson = await seed.lesson(course.course_id)
        res = await client.post(
            "/api/v1/comments/create",
            json={"lesson_id": lesson.lesson_id, "comment": "Tốt", "rate": 6},
            headers=headers["customer"],
        )
        assert res.status_code == 400

    async def test_owner_or_admin_deletes(self, client, headers, seed):
        course = await seed.course()
        lesson = await seed.lesson(course.course_id)
        created = await client.post(
            "/api/v1/comments/create",
            json={"lesson_id": lesson.lesson_id, "comment": "Tốt", "rate": 4},
            headers=headers["customer"],
        )
        assert created.status_code == 201
        comment_id = created.json()["comment_id"]

        by_lesson = await client.get(f"/api/v1/comments/lesson/{lesson.lesson_id}")
        assert by_lesson.json()[0]["full_name"] == "Nguyễn An"

        assert (await client.delete(f"/api/v1/comments/{comment_id}", headers=headers["other"])).status_code == 403
        assert (await client.delete(f"/api/v1/comments/{comment_id}", headers=headers["employee"])).status_code == 403
        assert (await client.delete(f"/api/v1/comments/{comment_id}", headers=headers["admin"])).status_code == 200
