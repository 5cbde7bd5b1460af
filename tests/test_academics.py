# tests/test_academics.py
from datetime import date

import pytest
from pydantic import ValidationError
from sqlalchemy import select

from edumanage.core.errors import ConflictError, NotFoundError
from edumanage.core.notices import NoticeBoard
from edumanage.models import Class
from edumanage.schemas.academics import ClassCreate, ClassUpdate, SubjectCreate, SubjectUpdate
from edumanage.schemas.enums import AppRole
from edumanage.services.class_service import ClassService, current_academic_year
from edumanage.services.subject_service import SubjectService


@pytest.mark.parametrize("today,label", [
    (date(2024, 9, 1), "2024-2025"),
    (date(2025, 3, 15), "2024-2025"),
    (date(2025, 8, 1), "2025-2026"),
])
def test_current_academic_year(today, label):
    assert current_academic_year(today) == label


async def test_admin_manages_classes(client, admin):
    _, headers = admin

    created = await client.post("/api/v1/classes", json={"name": "Grade 5A", "grade_level": "5", "section": "A"},
                                headers=headers)
    assert created.status_code == 201
    assert created.json()["message"] == "Class created successfully"
    class_id = created.json()["data"]["id"]
    assert created.json()["data"]["academic_year"] == current_academic_year()

    await client.post("/api/v1/classes", json={"name": "Grade 3B", "grade_level": "3"}, headers=headers)

    listed = await client.get("/api/v1/classes", headers=headers)
    assert [row["name"] for row in listed.json()] == ["Grade 3B", "Grade 5A"]

    updated = await client.patch(f"/api/v1/classes/{class_id}", json={"section": "B"}, headers=headers)
    assert updated.json()["message"] == "Class updated successfully"
    assert updated.json()["data"]["section"] == "B"
    assert updated.json()["data"]["name"] == "Grade 5A"

    deleted = await client.delete(f"/api/v1/classes/{class_id}", headers=headers)
    assert deleted.json()["message"] == "Class deleted successfully"

    listed = await client.get("/api/v1/classes", headers=headers)
    assert [row["name"] for row in listed.json()] == ["Grade 3B"]


async def test_explicit_null_for_required_column_is_rejected(client, session_factory, admin):
    _, headers = admin
    created = await client.post("/api/v1/classes", json={"name": "Grade 5A", "grade_level": "5"}, headers=headers)
    class_id = created.json()["data"]["id"]

    response = await client.patch(f"/api/v1/classes/{class_id}", json={"name": None}, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": "name may not be null"}
    async with session_factory() as session:
        assert (await session.get(Class, class_id)).name == "Grade 5A"


@pytest.mark.parametrize("body", [{"is_active": None}, {"academic_year": None}, {"grade_level": None}])
def test_class_update_rejects_null_for_required_columns(body):
    with pytest.raises(ValidationError, match="may not be null"):
        ClassUpdate(**body)


def test_nullable_columns_can_be_cleared():
    assert ClassUpdate(section=None).model_dump(exclude_unset=True) == {"section": None}
    assert SubjectUpdate(description=None).model_dump(exclude_unset=True) == {"description": None}
    with pytest.raises(ValidationError):
        SubjectUpdate(color=None)


async def test_teacher_can_read_but_not_write_classes(client, admin, teacher):
    _, admin_headers = admin
    _, teacher_headers = teacher
    await client.post("/api/v1/classes", json={"name": "Grade 1", "grade_level": "1"}, headers=admin_headers)

    assert len((await client.get("/api/v1/classes", headers=teacher_headers)).json()) == 1

    denied = await client.post("/api/v1/classes", json={"name": "Grade 2", "grade_level": "2"},
                               headers=teacher_headers)
    assert denied.status_code == 403
    assert denied.json() == {"error": "Only school admins can manage school records"}


async def test_user_without_school_is_rejected(client, make_user, headers_for):
    loner = await make_user("loner@springfield.edu")
    response = await client.get("/api/v1/classes", headers=headers_for(loner))
    assert response.status_code == 403


async def test_cross_tenant_update_and_delete_do_not_touch_row(
    client, session_factory, make_school, make_user, headers_for, admin
):
    _, headers = admin
    created = await client.post("/api/v1/classes", json={"name": "Grade 5A", "grade_level": "5"}, headers=headers)
    class_id = created.json()["data"]["id"]

    other = await make_school("Shelbyville Elementary")
    outsider = await make_user("admin@shelbyville.edu", other.id, [AppRole.SCHOOL_ADMIN])
    outsider_headers = headers_for(outsider)

    update = await client.patch(f"/api/v1/classes/{class_id}", json={"name": "Hijacked"}, headers=outsider_headers)
    assert update.status_code == 404
    delete = await client.delete(f"/api/v1/classes/{class_id}", headers=outsider_headers)
    assert delete.status_code == 404
    assert (await client.get("/api/v1/classes", headers=outsider_headers)).json() == []

    async with session_factory() as session:
        row = await session.get(Class, class_id)
        assert row is not None
        assert row.name == "Grade 5A"


async def test_mutation_posts_notice_and_invalidates_cache(db, cache, school):
    notices = NoticeBoard()
    service = ClassService(db, cache, notices)

    assert await service.list_classes(school.id) == []
    assert await cache.exists(("classes", school.id))

    await service.create_class(school.id, ClassCreate(name="Grade 1", grade_level="1"))

    assert not await cache.exists(("classes", school.id))
    assert notices.last.level == "success"
    assert notices.last.message == "Class created successfully"
    assert [row.name for row in await service.list_classes(school.id)] == ["Grade 1"]


async def test_failed_mutation_posts_error_and_keeps_cache(db, cache, school):
    notices = NoticeBoard()
    service = ClassService(db, cache, notices)
    await service.list_classes(school.id)

    with pytest.raises(NotFoundError):
        await service.update_class(school.id, "missing-id", ClassUpdate(name="Nope"))

    assert notices.last.level == "error"
    assert notices.last.message == "Class not found"
    assert await cache.exists(("classes", school.id))


async def test_delete_class_invalidates_dependent_reads(db, cache, redis_client, school):
    service = ClassService(db, cache, NoticeBoard())
    created = await service.create_class(school.id, ClassCreate(name="Grade 1", grade_level="1"))
    for key in [("timetable", school.id, None), ("students", school.id, None), ("attendance", school.id, created.id, "2024-09-02")]:
        await cache.set(key, ["stale"])

    await service.delete_class(school.id, created.id)

    assert await redis_client.keys("edumanage:cache:*") == []
    remaining = (await db.execute(select(Class).where(Class.school_id == school.id))).scalars().all()
    assert remaining == []


async def test_subjects_sorted_by_name_with_default_color(client, admin):
    _, headers = admin
    for name, code in [("Science", "SCI"), ("Art", "ART")]:
        response = await client.post("/api/v1/subjects", json={"name": name, "code": code}, headers=headers)
        assert response.json()["message"] == "Subject created successfully"

    subjects = (await client.get("/api/v1/subjects", headers=headers)).json()
    assert [row["name"] for row in subjects] == ["Art", "Science"]
    assert subjects[0]["color"] == "#3B82F6"


async def test_duplicate_subject_code_is_a_conflict(db, cache, school):
    notices = NoticeBoard()
    service = SubjectService(db, cache, notices)
    await service.create_subject(school.id, SubjectCreate(name="Math", code="MATH"))

    with pytest.raises(ConflictError) as exc_info:
        await service.create_subject(school.id, SubjectCreate(name="Mathematics", code="MATH"))

    assert exc_info.value.status_code == 409
    assert notices.last.level == "error"
    assert notices.last.message == exc_info.value.message
    assert len(await service.list_subjects(school.id)) == 1


async def test_same_subject_code_in_two_schools(db, cache, make_school, school):
    other = await make_school("Shelbyville Elementary")
    service = SubjectService(db, cache, NoticeBoard())
    await service.create_subject(school.id, SubjectCreate(name="Math", code="MATH"))
    await service.create_subject(other.id, SubjectCreate(name="Math", code="MATH"))

    assert len(await service.list_subjects(school.id)) == 1
    assert len(await service.list_subjects(other.id)) == 1


async def test_invalid_subject_color_is_rejected(client, admin):
    _, headers = admin
    response = await client.post("/api/v1/subjects", json={"name": "Art", "code": "ART", "color": "blue"},
                                 headers=headers)
    assert response.status_code == 400
    assert response.json()["error"].startswith("color")
