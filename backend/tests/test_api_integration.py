from coursegrid.services.course_schedule import create_course_with_schedule


def create_user(client, name, email, role):
    response = client.post("/api/users", json={"name": name, "email": email, "role": role})
    assert response.status_code == 201
    return response.json()


def create_course(client, code, credits, capacity=30, teacher_id=None):
    response = client.post(
        "/api/courses/",
        json={"code": code, "name": f"Course {code}", "credits": credits, "capacity": capacity, "teacher_id": teacher_id},
    )
    assert response.status_code == 201
    return response.json()


def enroll(client, student_id, course_id):
    return client.post("/api/enrollments", json={"student_id": student_id, "course_id": course_id})


def hours(value):
    return int(value.split(":")[0])


def test_course_enrollment_and_schedule_flow(client):
    teacher = create_user(client, "Prof Ramirez", "ramirez@example.com", "teacher")
    s1 = create_user(client, "Student One", "s1@example.com", "student")
    s2 = create_user(client, "Student Two", "s2@example.com", "student")

    created = create_course(client, "mat101", credits=3, teacher_id=teacher["id"])
    course_id = created["course"]["id"]
    assert created["course"]["code"] == "MAT101"
    assert [block["weekday"] for block in created["blocks"]] == ["Monday", "Tuesday"]
    for block in created["blocks"]:
        assert hours(block["end_time"]) - hours(block["start_time"]) == 2
        assert 6 <= hours(block["start_time"]) <= 18
    assert created["sync"]["total"] == 0

    for student in (s1, s2):
        response = enroll(client, student["id"], course_id)
        assert response.status_code == 201
        assert response.json()["sync"]["created"] == 2

    schedule = client.get(f"/api/students/{s1['id']}/schedule")
    assert schedule.status_code == 200
    payload = schedule.json()
    assert len(payload["entries"]) == 2
    assert payload["entries"][0]["teacher_name"] == "Prof Ramirez"
    assert [len(payload["by_weekday"][day]) for day in ("Monday", "Tuesday", "Wednesday")] == [1, 1, 0]

    course = client.get(f"/api/courses/{course_id}").json()
    assert course["course"]["enrolled_count"] == 2
    assert len(course["blocks"]) == 2

    teacher_view = client.get(f"/api/teachers/{teacher['id']}/schedule").json()
    assert [entry["enrolled_count"] for entry in teacher_view["entries"]] == [2, 2]

    enrollments = client.get(f"/api/students/{s1['id']}/enrollments").json()
    assert len(enrollments) == 1
    withdrawn = client.delete(f"/api/enrollments/{enrollments[0]['id']}")
    assert withdrawn.status_code == 200
    assert withdrawn.json()["assignments_removed"] == 2

    assert client.get(f"/api/students/{s1['id']}/schedule").json()["entries"] == []
    assert len(client.get(f"/api/students/{s2['id']}/schedule").json()["entries"]) == 2

    status = client.get("/api/sync/all").json()
    assert status["in_sync"] is True
    assert status["total_assignments"] == 2

    deleted = client.delete(f"/api/courses/{course_id}")
    assert deleted.status_code == 200
    assert deleted.json() == {"course_id": course_id, "assignments": 2, "blocks": 2, "enrollments": 1}

    orphans = client.get("/api/cleanup").json()
    assert orphans["total"] == 0
    assert client.get(f"/api/courses/{course_id}").status_code == 404


def test_sync_all_endpoint_is_idempotent(client):
    student = create_user(client, "Idem Student", "idem@example.com", "student")
    course = create_course(client, "IDM100", credits=4)
    assert enroll(client, student["id"], course["course"]["id"]).status_code == 201

    first = client.post("/api/sync/all").json()
    second = client.post("/api/sync/all").json()

    assert first == {"created": 0, "skipped": 3, "errors": 0, "removed": 0, "total": 3}
    assert second == first


def test_scoped_regenerate_requires_an_identifier(client):
    response = client.post("/api/sync/regenerate", json={})

    assert response.status_code == 400
    assert response.json()["message"] == "student_id or course_id is required"


def test_scoped_regenerate_by_course(client):
    student = create_user(client, "Scoped Student", "scoped@example.com", "student")
    course = create_course(client, "SCP100", credits=2)
    enroll(client, student["id"], course["course"]["id"])

    response = client.post("/api/sync/regenerate", json={"course_id": course["course"]["id"]})

    assert response.status_code == 200
    assert response.json()["skipped"] == 1


def test_schedule_regeneration_endpoint_replaces_blocks(client):
    student = create_user(client, "Regen Student", "regen@example.com", "student")
    course = create_course(client, "RGN100", credits=3)
    course_id = course["course"]["id"]
    enroll(client, student["id"], course_id)
    old_ids = {block["id"] for block in course["blocks"]}

    response = client.post(f"/api/courses/{course_id}/schedule")

    assert response.status_code == 200
    body = response.json()
    assert {block["id"] for block in body["blocks"]}.isdisjoint(old_ids)
    assert body["sync"]["created"] == 2
    assert body["sync"]["removed"] == 2
    schedule = client.get(f"/api/students/{student['id']}/schedule", params={"resync": True}).json()
    assert {entry["block_id"] for entry in schedule["entries"]} == {block["id"] for block in body["blocks"]}


def test_removing_a_single_block(client):
    student = create_user(client, "Block Student", "block@example.com", "student")
    course = create_course(client, "BLK100", credits=4)
    course_id = course["course"]["id"]
    enroll(client, student["id"], course_id)
    block_id = course["blocks"][0]["id"]

    response = client.delete(f"/api/courses/{course_id}/blocks/{block_id}")

    assert response.status_code == 200
    assert response.json() == {"success": True, "assignments_removed": 1}
    assert len(client.get(f"/api/courses/{course_id}/blocks").json()) == 2
    assert client.delete(f"/api/courses/{course_id}/blocks/{block_id}").status_code == 404


def test_enrollment_errors(client):
    student = create_user(client, "Only Seat", "seat@example.com", "student")
    late = create_user(client, "Late Student", "late@example.com", "student")
    course = create_course(client, "ONE100", credits=2, capacity=1)
    course_id = course["course"]["id"]

    assert enroll(client, student["id"], course_id).status_code == 201
    duplicate = enroll(client, student["id"], course_id)
    assert duplicate.status_code == 409
    full = enroll(client, late["id"], course_id)
    assert full.status_code == 409
    assert full.json()["message"] == "Course is full"
    assert enroll(client, late["id"], "missing-course").status_code == 404
    assert [row["email"] for row in client.get(f"/api/courses/{course_id}/students").json()] == ["seat@example.com"]


def test_course_validation(client):
    invalid = client.post("/api/courses/", json={"code": "X1", "name": "Bad", "credits": 0, "capacity": 5})
    assert invalid.status_code == 422

    create_course(client, "DUP200", credits=2)
    duplicate = client.post("/api/courses/", json={"code": "dup200", "name": "Again", "credits": 2, "capacity": 5})
    assert duplicate.status_code == 409

    assert client.delete("/api/courses/missing").status_code == 404
    assert client.get("/api/students/missing/schedule").status_code == 404


def test_user_listing_by_role(client):
    create_user(client, "Zed Teacher", "zed@example.com", "teacher")
    create_user(client, "Amy Student", "amy@example.com", "student")
    duplicate = client.post("/api/users", json={"name": "Amy", "email": "AMY@example.com", "role": "student"})

    assert duplicate.status_code == 409
    assert [row["name"] for row in client.get("/api/students").json()] == ["Amy Student"]
    assert [row["name"] for row in client.get("/api/teachers").json()] == ["Zed Teacher"]


def test_course_listing_serves_courses_created_outside_the_api_bounds(client, db_session):
    create_course_with_schedule(db_session, code="BIG900", name="Intensive", credits=13, capacity=1500)
    db_session.commit()

    response = client.get("/api/courses/")

    assert response.status_code == 200
    [course] = response.json()
    assert (course["credits"], course["capacity"]) == (13, 1500)
