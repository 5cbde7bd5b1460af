# tests/test_attendance.py
from datetime import date

import pytest
from sqlalchemy import func, select

from edumanage.models import AttendanceRecord, Class, Student
from edumanage.schemas.attendance import AttendanceRead
from edumanage.schemas.enums import AppRole, AttendanceStatus
from edumanage.services.attendance_service import student_stats, summarize

MONDAY = "2024-09-02"


@pytest.fixture
async def roster(session_factory, school):
    """One class with three enrolled students"""
    async with session_factory() as session:
        grade = Class(school_id=school.id, name="Grade 4", grade_level="4", academic_year="2024-2025")
        session.add(grade)
        await session.flush()
        students = [
            Student(school_id=school.id, class_id=grade.id, first_name=first, last_name=last)
            for first, last in [("Bart", "Simpson"), ("Milhouse", "Van Houten"), ("Nelson", "Muntz")]
        ]
        session.add_all(students)
        await session.commit()
        return {"class_id": grade.id, "student_ids": [student.id for student in students]}


def marking(roster, statuses, on=MONDAY):
    return {
        "class_id": roster["class_id"],
        "date": on,
        "entries": [
            {"student_id": student_id, "status": status}
            for student_id, status in zip(roster["student_ids"], statuses)
        ],
    }


async def count_records(session_factory):
    async with session_factory() as session:
        return await session.scalar(select(func.count()).select_from(AttendanceRecord))


async def test_mark_attendance(client, teacher, roster):
    teacher_id, headers = teacher
    response = await client.post("/api/v1/attendance", json=marking(roster, ["present", "absent", "late"]),
                                 headers=headers)

    assert response.status_code == 200
    payload = response.json()
    assert payload["message"] == "Attendance saved successfully"
    assert {record["status"] for record in payload["data"]} == {"present", "absent", "late"}
    assert all(record["marked_by"] == teacher_id for record in payload["data"])
    assert {record["students"]["first_name"] for record in payload["data"]} == {"Bart", "Milhouse", "Nelson"}


async def test_remarking_replaces_rows(client, session_factory, admin, roster):
    _, headers = admin
    await client.post("/api/v1/attendance", json=marking(roster, ["present", "present", "present"]),
                      headers=headers)
    first = (await client.get("/api/v1/attendance", params={"class_id": roster["class_id"], "date": MONDAY},
                              headers=headers)).json()

    await client.post("/api/v1/attendance", json=marking(roster, ["absent", "present", "excused"]),
                      headers=headers)
    second = (await client.get("/api/v1/attendance", params={"class_id": roster["class_id"], "date": MONDAY},
                               headers=headers)).json()

    assert await count_records(session_factory) == 3
    statuses = {record["student_id"]: record["status"] for record in second}
    assert statuses == dict(zip(roster["student_ids"], ["absent", "present", "excused"]))
    assert {record["id"] for record in first} == {record["id"] for record in second}


async def test_last_entry_for_a_student_wins(client, session_factory, admin, roster):
    _, headers = admin
    bart = roster["student_ids"][0]
    body = {
        "class_id": roster["class_id"],
        "date": MONDAY,
        "entries": [
            {"student_id": bart, "status": "absent"},
            {"student_id": bart, "status": "late", "notes": "Bus was late"},
        ],
    }

    response = await client.post("/api/v1/attendance", json=body, headers=headers)

    assert [(record["status"], record["notes"]) for record in response.json()["data"]] == [("late", "Bus was late")]
    assert await count_records(session_factory) == 1


async def test_day_summary(client, admin, roster):
    _, headers = admin
    await client.post("/api/v1/attendance", json=marking(roster, ["present", "late", "late"]), headers=headers)

    summary = await client.get("/api/v1/attendance/summary",
                               params={"class_id": roster["class_id"], "date": MONDAY}, headers=headers)

    assert summary.json() == {"present": 1, "absent": 0, "late": 2, "excused": 0, "total": 3}


async def test_weekly_report(client, admin, roster):
    _, headers = admin
    for day, statuses in [
        ("2024-09-02", ["present", "absent", "present"]),
        ("2024-09-03", ["late", "absent", "present"]),
        ("2024-09-04", ["absent", "absent", "present"]),
        ("2024-09-09", ["present", "present", "present"]),
    ]:
        await client.post("/api/v1/attendance", json=marking(roster, statuses, on=day), headers=headers)

    response = await client.get("/api/v1/attendance/report", params={
        "class_id": roster["class_id"],
        "week_start": "2024-09-02",
        "week_end": "2024-09-06",
    }, headers=headers)

    report = response.json()
    assert len(report["records"]) == 9
    assert [record["date"] for record in report["records"]][::3] == ["2024-09-02", "2024-09-03", "2024-09-04"]
    stats = {row["student_id"]: (row["present"], row["total"], row["percentage"]) for row in report["stats"]}
    bart, milhouse, nelson = roster["student_ids"]
    assert stats[bart] == (2, 3, 67)
    assert stats[milhouse] == (0, 3, 0)
    assert stats[nelson] == (3, 3, 100)


async def test_report_range_must_be_ordered(client, admin, roster):
    _, headers = admin
    response = await client.get("/api/v1/attendance/report", params={
        "class_id": roster["class_id"],
        "week_start": "2024-09-06",
        "week_end": "2024-09-02",
    }, headers=headers)
    assert response.status_code == 400


async def test_cached_read_sees_new_marking(client, admin, roster):
    _, headers = admin
    params = {"class_id": roster["class_id"], "date": MONDAY}
    assert (await client.get("/api/v1/attendance", params=params, headers=headers)).json() == []

    await client.post("/api/v1/attendance", json=marking(roster, ["present"]), headers=headers)

    assert len((await client.get("/api/v1/attendance", params=params, headers=headers)).json()) == 1


async def test_parent_cannot_mark(client, session_factory, parent, roster):
    _, headers = parent
    response = await client.post("/api/v1/attendance", json=marking(roster, ["present"]), headers=headers)

    assert response.status_code == 403
    assert response.json() == {"error": "Only school admins and teachers can mark attendance"}
    assert await count_records(session_factory) == 0


async def test_student_from_other_school_is_rejected(client, session_factory, make_school, admin, roster):
    _, headers = admin
    other = await make_school("Shelbyville Elementary")
    async with session_factory() as session:
        stranger = Student(school_id=other.id, first_name="Jimbo", last_name="Jones")
        session.add(stranger)
        await session.commit()
        stranger_id = stranger.id

    body = {
        "class_id": roster["class_id"],
        "date": MONDAY,
        "entries": [
            {"student_id": roster["student_ids"][0], "status": "present"},
            {"student_id": stranger_id, "status": "present"},
        ],
    }
    response = await client.post("/api/v1/attendance", json=body, headers=headers)

    assert response.status_code == 400
    assert response.json() == {"error": f"Students not found in this school: {stranger_id}"}
    assert await count_records(session_factory) == 0


async def test_class_from_other_school_is_not_found(client, make_school, make_user, headers_for, roster):
    other = await make_school("Shelbyville Elementary")
    outsider = await make_user("teacher@shelbyville.edu", other.id, [AppRole.TEACHER])

    response = await client.post("/api/v1/attendance", json=marking(roster, ["present"]),
                                 headers=headers_for(outsider))
    assert response.status_code == 404


def record(student_id, status):
    return AttendanceRead.model_construct(student_id=student_id, status=status, date=date(2024, 9, 2))


def test_summarize_counts_each_status():
    records = [
        record("a", AttendanceStatus.PRESENT),
        record("b", AttendanceStatus.EXCUSED),
        record("c", AttendanceStatus.EXCUSED),
    ]
    summary = summarize(records)
    assert (summary.present, summary.absent, summary.late, summary.excused, summary.total) == (1, 0, 0, 2, 3)


def test_student_stats_counts_late_as_attended():
    records = [
        record("a", AttendanceStatus.LATE),
        record("a", AttendanceStatus.EXCUSED),
        record("a", AttendanceStatus.PRESENT),
    ]
    [stats] = student_stats(records)
    assert (stats.present, stats.total, stats.percentage) == (2, 3, 67)


def test_student_stats_empty():
    assert student_stats([]) == []
