import logging

from fastapi.testclient import TestClient

from tests.helpers.asserts import api_call, assert_error, assert_dense


def _create_course(client: TestClient, description="How markets work"):
    course_type = api_call(client, "POST", "/course-types/", json={"name": "Self-paced"}, expected_status=201)["data"]
    return api_call(client, "POST", "/courses/", json={
        "title": "Market Basics",
        "description": description,
        "course_type_id": course_type["id"],
    }, headers={"X-Actor-Id": "12"}, expected_status=201)["data"]


def test_course_type_crud(client: TestClient):
    print("\n[TEST] Course type endpoints")
    created = api_call(client, "POST", "/course-types/", json={"name": "Bootcamp"}, expected_status=201)
    assert created["code"] == 201
    type_id = created["data"]["id"]

    duplicate = api_call(client, "POST", "/course-types/", json={"name": "Bootcamp"}, expected_status=422)
    assert_error(duplicate, "BUSINESS_RULE_VIOLATION")

    api_call(client, "PUT", f"/course-types/{type_id}/deactivate")
    active = api_call(client, "GET", "/course-types/?active_only=true")["data"]
    assert type_id not in [t["id"] for t in active]

    api_call(client, "DELETE", f"/course-types/{type_id}")
    missing = api_call(client, "GET", f"/course-types/{type_id}", expected_status=404)
    assert_error(missing, "NOT_FOUND")
    print("[OK] Course type lifecycle")


def test_publish_flow_over_http(client: TestClient):
    print("\n[TEST] Publish over HTTP")
    course = _create_course(client)
    assert course["status"] == "draft"
    assert course["created_by"] == 12

    check = api_call(client, "GET", f"/courses/{course['id']}/publishability")["data"]
    assert check["is_publishable"] is False
    assert "Course must have at least one instructor" in check["reasons"]

    refused = api_call(client, "PUT", f"/courses/{course['id']}/publish", expected_status=422)
    assert_error(refused, "COURSE_NOT_PUBLISHABLE", "Course cannot be published.")
    assert refused["data"]["reasons"] == check["reasons"]

    api_call(client, "POST", f"/courses/{course['id']}/instructors", json={"instructor_id": 40}, expected_status=201)
    api_call(client, "POST", "/units/", json={"course_id": course["id"], "title": "Orientation"}, expected_status=201)

    published = api_call(client, "PUT", f"/courses/{course['id']}/publish")["data"]
    assert published["status"] == "published"
    assert published["published_at"] is not None
    assert published["instructors"][0]["is_primary"] is True

    listed = api_call(client, "GET", "/courses/?status=published")["data"]
    assert listed["total"] == 1
    assert listed["items"][0]["id"] == course["id"]
    print("[OK] Course published")


def test_unit_and_lesson_ordering_endpoints(client: TestClient):
    print("\n[TEST] Ordering endpoints")
    course = _create_course(client)
    units = [
        api_call(client, "POST", "/units/", json={"course_id": course["id"], "title": f"Unit {i}"}, expected_status=201)["data"]
        for i in range(3)
    ]
    assert [u["unit_order"] for u in units] == [1, 2, 3]

    clash = api_call(client, "POST", "/units/", json={"course_id": course["id"], "title": "Clash", "unit_order": 1}, expected_status=422)
    assert_error(clash, "DUPLICATE_ORDER", "Unit order 1 already exists.")

    reordered = api_call(client, "POST", f"/units/{course['id']}/reorder", json={str(units[2]["id"]): 1})["data"]
    assert [u["id"] for u in reordered] == [units[2]["id"], units[0]["id"], units[1]["id"]]
    assert_dense(reordered, "unit_order")

    duplicate = api_call(client, "POST", f"/units/{course['id']}/reorder", json={str(units[0]["id"]): 2, str(units[1]["id"]): 2}, expected_status=422)
    assert_error(duplicate, "DUPLICATE_ORDER", "Duplicate orders found.")

    moved = api_call(client, "PUT", f"/units/{units[2]['id']}/move", json={"order": 3})["data"]
    assert moved["unit_order"] == 3

    unit_id = units[0]["id"]
    for i in range(2):
        api_call(client, "POST", "/lessons/", json={"unit_id": unit_id, "title": f"Lesson {i}"}, expected_status=201)
    blocked = api_call(client, "DELETE", f"/units/{unit_id}", expected_status=409)
    assert_error(blocked, "DELETION_BLOCKED", "Unit has 2 lesson(s). Delete or move them first.")
    assert blocked["data"] == {"lessons_count": 2}

    listed = api_call(client, "GET", f"/units/course/{course['id']}")["data"]
    assert_dense(listed, "unit_order")
    with_lessons = next(u for u in listed if u["id"] == unit_id)
    assert [l["lesson_order"] for l in with_lessons["lessons"]] == [1, 2]
    print("[OK] Orders unique and dense")


def test_validation_errors_use_envelope(client: TestClient):
    body = api_call(client, "POST", "/units/", json={"title": "No course"}, expected_status=422)
    assert_error(body, "VALIDATION_ERROR")
    assert body["data"]["validation_errors"]


def test_request_id_is_echoed(client: TestClient):
    response = client.get("/courses/9999", headers={"X-Request-ID": "req-123"})
    assert response.status_code == 404
    assert response.headers["X-Request-ID"] == "req-123"
    assert response.json()["request_id"] == "req-123"


class _Collect(logging.Handler):
    def __init__(self):
        super().__init__(level=logging.INFO)
        self.records = []

    def emit(self, record):
        self.records.append(record)


def test_access_log_carries_actor_and_route(client: TestClient):
    print("\n[TEST] Access log fields")
    access_logger = logging.getLogger("app.middleware.logging")
    handler = _Collect()
    access_logger.addHandler(handler)
    try:
        response = client.get("/courses/9999", headers={"X-Actor-Id": "42", "X-Request-ID": "req-9"})
    finally:
        access_logger.removeHandler(handler)

    assert "X-Process-Time-Ms" in response.headers
    record = next(r for r in handler.records if getattr(r, "request_id", None) == "req-9")
    assert record.actor_id == 42
    assert record.route == "/courses/{course_id}"
    assert record.status_code == 404
    assert record.levelno == logging.WARNING
    print("[OK] Actor and route template logged")
