from fastapi.testclient import TestClient
from sqlalchemy.orm import Session

from app.crud.lesson import lesson as crud_lesson
from tests.helpers.asserts import api_call, assert_error


def test_enrollment_endpoints(client: TestClient, db_session: Session, published_course):
    print("\n[TEST] Enrollment endpoints")
    course = published_course(lessons=2)
    lessons = crud_lesson.get_by_course(db_session, course.id)

    body = api_call(client, "POST", "/enrollments/", json={"course_id": course.id, "learner_id": 88}, expected_status=201)
    enrollment = body["data"]
    assert body["code"] == 201
    assert enrollment["status"] == "active"
    assert enrollment["enrolled_by"] == 88

    again = api_call(client, "POST", "/enrollments/", json={"course_id": course.id, "learner_id": 88}, expected_status=422)
    assert_error(again, "ALREADY_ENROLLED", "This learner is already enrolled in this course.")

    assert api_call(client, "GET", f"/enrollments/check?course_id={course.id}&learner_id=88")["data"] is True

    progressed = api_call(client, "POST", f"/enrollments/{enrollment['id']}/lessons/{lessons[0].id}/complete")["data"]
    assert progressed["progress_percentage"] == 50.0

    details = api_call(client, "GET", f"/enrollments/{enrollment['id']}/progress")["data"]
    assert details["completed_lessons"] == 1
    assert details["remaining_lessons"] == 1

    rejected = api_call(client, "PUT", f"/enrollments/{enrollment['id']}/status", json={"status": "completed"}, expected_status=422)
    assert_error(rejected, "INVALID_STATUS_TRANSITION")

    dropped = api_call(client, "PUT", f"/enrollments/{enrollment['id']}/drop")["data"]
    assert dropped["status"] == "dropped"

    page = api_call(client, "GET", f"/enrollments/course/{course.id}?status=dropped")["data"]
    assert page["total"] == 1
    learner_page = api_call(client, "GET", "/enrollments/learner/88")["data"]
    assert [e["id"] for e in learner_page["items"]] == [enrollment["id"]]
    print("[OK] Enrollment lifecycle over HTTP")


def test_draft_course_enrollment_is_refused(client: TestClient, course_factory):
    course = course_factory()
    body = api_call(client, "POST", "/enrollments/", json={"course_id": course.id, "learner_id": 1}, expected_status=422)
    assert_error(body, "COURSE_NOT_ENROLLABLE")


def test_quiz_attempt_flow(client: TestClient, course_factory):
    print("\n[TEST] Quiz attempt flow")
    course = course_factory()
    quiz = api_call(client, "POST", "/quizzes/", json={
        "course_id": course.id, "title": "Checkpoint", "duration_minutes": 30, "passing_score": 2, "max_score": 3,
    }, expected_status=201)["data"]
    assert quiz["status"] == "draft"

    question = api_call(client, "POST", "/questions/", json={
        "quiz_id": quiz["id"],
        "question_type": "multiple_choice",
        "question_text": "Pick the index fund",
        "score": 3,
        "options": [{"option_text": "S&P 500 tracker", "is_correct": True}, {"option_text": "Penny stock"}],
    }, expected_status=201)["data"]
    correct_option = next(o for o in question["options"] if o["is_correct"])

    not_started = api_call(client, "POST", "/attempts/start", json={"quiz_id": quiz["id"], "student_id": 5}, expected_status=422)
    assert_error(not_started, "QUIZ_NOT_STARTABLE", "Quiz is not published.")

    api_call(client, "PUT", f"/quizzes/{quiz['id']}/publish")
    attempt = api_call(client, "POST", "/attempts/start", json={"quiz_id": quiz["id"]}, headers={"X-Actor-Id": "5"}, expected_status=201)["data"]
    assert attempt["student_id"] == 5
    assert attempt["attempt_number"] == 1
    assert attempt["remaining_seconds"] > 0

    blocked = api_call(client, "PUT", f"/quizzes/{quiz['id']}/unpublish", expected_status=409)
    assert_error(blocked, "ACTIVE_ATTEMPT_IN_PROGRESS")

    answer_body = {"attempt_id": attempt["id"], "question_id": question["id"], "selected_option": correct_option["id"]}
    created = client.post("/answers/", json=answer_body)
    assert created.status_code == 201
    assert created.json()["data"]["is_correct"] is True
    updated = client.post("/answers/", json=answer_body)
    assert updated.status_code == 200
    assert updated.json()["data"]["id"] == created.json()["data"]["id"]

    submitted = api_call(client, "PUT", f"/attempts/{attempt['id']}/submit")
    assert submitted["message"] == "Attempt submitted successfully."
    assert submitted["data"]["status"] == "submitted"

    resubmitted = api_call(client, "PUT", f"/attempts/{attempt['id']}/submit")
    assert resubmitted["message"] == "Attempt is not in progress."

    graded = api_call(client, "PUT", f"/attempts/{attempt['id']}/auto-grade", headers={"X-Actor-Id": "99"})["data"]
    assert graded["status"] == "graded"
    assert graded["score"] == 3
    assert graded["is_passed"] is True
    assert graded["graded_by"] == 99

    regrade = api_call(client, "PUT", f"/attempts/{attempt['id']}/grade", json={"score": 0})
    assert regrade["message"] == "Attempt has already been graded."
    assert regrade["data"]["score"] == 3

    detail = api_call(client, "GET", f"/attempts/{attempt['id']}")["data"]
    assert len(detail["answers"]) == 1

    attempts = api_call(client, "GET", f"/quizzes/{quiz['id']}/attempts")["data"]
    assert attempts["total"] == 1

    report = api_call(client, "GET", f"/reports/quizzes/{quiz['id']}")["data"]
    assert report["graded_attempts"] == 1
    assert report["pass_rate"] == 100.0
    print("[OK] Attempt graded and reported")


def test_start_without_student_is_refused(client: TestClient, quiz_factory):
    quiz = quiz_factory()
    body = api_call(client, "POST", "/attempts/start", json={"quiz_id": quiz.id}, expected_status=422)
    assert_error(body, "BUSINESS_RULE_VIOLATION", "student_id is required.")


def test_course_and_learner_reports(client: TestClient, published_course):
    course = published_course()
    api_call(client, "POST", "/enrollments/", json={"course_id": course.id, "learner_id": 3}, expected_status=201)

    course_report = api_call(client, "GET", f"/reports/courses/{course.id}")["data"]
    assert course_report["total_enrollments"] == 1
    learner_report = api_call(client, "GET", "/reports/learners/3")["data"]
    assert learner_report["total_enrollments"] == 1
    assert learner_report["enrollments"][0]["course_id"] == course.id


def test_health(client: TestClient):
    body = api_call(client, "GET", "/health")
    assert body["message"] == "Service is healthy"
