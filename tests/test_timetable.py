# tests/test_timetable.py
import pytest

from edumanage.schemas.enums import AppRole


@pytest.fixture
async def catalog(client, admin):
    """A class and two subjects in the default school"""
    _, headers = admin
    class_id = (await client.post("/api/v1/classes", json={"name": "Grade 4", "grade_level": "4"},
                                  headers=headers)).json()["data"]["id"]
    math_id = (await client.post("/api/v1/subjects", json={"name": "Math", "code": "MATH", "color": "#FF0000"},
                                 headers=headers)).json()["data"]["id"]
    art_id = (await client.post("/api/v1/subjects", json={"name": "Art", "code": "ART"},
                                headers=headers)).json()["data"]["id"]
    return {"class_id": class_id, "math_id": math_id, "art_id": art_id}


def slot(catalog, subject="math_id", day=1, start="09:00:00", end="09:45:00", **extra):
    body = {
        "class_id": catalog["class_id"],
        "subject_id": catalog[subject],
        "day_of_week": day,
        "start_time": start,
        "end_time": end,
    }
    body.update(extra)
    return body


async def test_entries_ordered_by_day_then_start(client, admin, teacher, catalog):
    _, headers = admin
    teacher_id, _ = teacher
    for body in [
        slot(catalog, day=3, start="08:00:00", end="08:45:00"),
        slot(catalog, subject="art_id", day=1, start="10:00:00", end="10:45:00", teacher_id=teacher_id, room="A1"),
        slot(catalog, day=1, start="08:00:00", end="08:45:00"),
    ]:
        created = await client.post("/api/v1/timetable", json=body, headers=headers)
        assert created.status_code == 201
        assert created.json()["message"] == "Timetable entry created successfully"

    entries = (await client.get("/api/v1/timetable", headers=headers)).json()

    assert [(entry["day_of_week"], entry["start_time"]) for entry in entries] == [
        (1, "08:00:00"), (1, "10:00:00"), (3, "08:00:00")
    ]
    art = entries[1]
    assert art["subjects"] == {"name": "Art", "code": "ART", "color": "#3B82F6"}
    assert art["classes"] == {"name": "Grade 4", "grade_level": "4"}
    assert art["profiles"] == {"full_name": "Edna Krabappel"}
    assert entries[0]["profiles"] is None


async def test_overlapping_slots_are_allowed(client, admin, catalog):
    _, headers = admin
    first = await client.post("/api/v1/timetable", json=slot(catalog, room="B2"), headers=headers)
    second = await client.post("/api/v1/timetable", json=slot(catalog, subject="art_id", room="B2"), headers=headers)

    assert first.status_code == 201
    assert second.status_code == 201


async def test_weekly_grid_groups_by_day(client, admin, catalog):
    _, headers = admin
    await client.post("/api/v1/timetable", json=slot(catalog, day=5), headers=headers)
    await client.post("/api/v1/timetable", json=slot(catalog, day=2), headers=headers)
    await client.post("/api/v1/timetable", json=slot(catalog, day=2, start="11:00:00", end="11:30:00"),
                      headers=headers)

    grid = (await client.get("/api/v1/timetable/grid", params={"class_id": catalog["class_id"]},
                             headers=headers)).json()

    assert [day["day_of_week"] for day in grid] == [2, 5]
    assert len(grid[0]["entries"]) == 2


async def test_filter_by_class(client, admin, catalog):
    _, headers = admin
    other_class = (await client.post("/api/v1/classes", json={"name": "Grade 6", "grade_level": "6"},
                                     headers=headers)).json()["data"]["id"]
    await client.post("/api/v1/timetable", json=slot(catalog), headers=headers)
    await client.post("/api/v1/timetable", json=slot(catalog, class_id=other_class), headers=headers)

    entries = (await client.get("/api/v1/timetable", params={"class_id": other_class}, headers=headers)).json()
    assert [entry["class_id"] for entry in entries] == [other_class]


async def test_update_and_delete_entry(client, admin, catalog):
    _, headers = admin
    entry_id = (await client.post("/api/v1/timetable", json=slot(catalog), headers=headers)).json()["data"]["id"]

    updated = await client.patch(f"/api/v1/timetable/{entry_id}", json={"room": "Gym", "day_of_week": 4},
                                 headers=headers)
    assert updated.json()["message"] == "Timetable entry updated successfully"
    assert updated.json()["data"]["room"] == "Gym"
    assert updated.json()["data"]["subjects"]["code"] == "MATH"

    deleted = await client.delete(f"/api/v1/timetable/{entry_id}", headers=headers)
    assert deleted.json()["message"] == "Timetable entry deleted successfully"
    assert (await client.get("/api/v1/timetable", headers=headers)).json() == []


async def test_end_must_follow_start(client, admin, catalog):
    _, headers = admin
    response = await client.post("/api/v1/timetable", json=slot(catalog, start="10:00:00", end="09:00:00"),
                                 headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "End time must be after start time"}


async def test_day_of_week_range(client, admin, catalog):
    _, headers = admin
    response = await client.post("/api/v1/timetable", json=slot(catalog, day=7), headers=headers)
    assert response.status_code == 400


async def test_class_from_another_school_is_not_found(client, make_school, make_user, headers_for, catalog):
    other = await make_school("Shelbyville Elementary")
    outsider = await make_user("admin@shelbyville.edu", other.id, [AppRole.SCHOOL_ADMIN])

    response = await client.post("/api/v1/timetable", json=slot(catalog), headers=headers_for(outsider))
    assert response.status_code == 404
    assert response.json() == {"error": "Class not found"}


async def test_teacher_must_belong_to_school(client, admin, make_user, catalog):
    _, headers = admin
    stranger = await make_user("stranger@shelbyville.edu")

    response = await client.post("/api/v1/timetable", json=slot(catalog, teacher_id=stranger), headers=headers)
    assert response.status_code == 400
    assert response.json() == {"error": "Teacher is not a member of this school"}
