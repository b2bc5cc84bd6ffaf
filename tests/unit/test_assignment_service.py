"""Unit tests for AssignmentService: create, list, submit, grade."""
from datetime import datetime, timedelta, timezone

import pytest

from nexus.errors import NotFoundError, ValidationError
from nexus.models.models import Submission


def _create(assignments, course, now, **kw):
    kw.setdefault("title", "Essay")
    kw.setdefault("due_at", now + timedelta(days=2))
    return assignments.create(teacher_id=course.user_id, course_id=course.id, **kw)


@pytest.mark.unit
class TestCreateAssignment:
    def test_defaults(self, assignments, course, now):
        a = _create(assignments, course, now)
        assert a.points == 100
        assert a.type == "homework"
        assert a.assigned_to == []
        assert a.attachments == []

    def test_aware_due_date_stored_as_naive_utc(self, assignments, course, now):
        due = datetime(2026, 4, 1, 9, 0, tzinfo=timezone(timedelta(hours=-5)))
        a = _create(assignments, course, now, due_at=due)
        assert a.due_at == datetime(2026, 4, 1, 14, 0)

    @pytest.mark.parametrize("field", ["title", "due_at"])
    def test_required_fields(self, assignments, course, now, field):
        with pytest.raises(ValidationError):
            _create(assignments, course, now, **{field: None})

    def test_requires_course(self, assignments, teacher, now):
        with pytest.raises(ValidationError, match="courseId is required"):
            assignments.create(teacher_id=teacher.id, course_id=None, title="T", due_at=now)

    def test_rejects_unknown_type(self, assignments, course, now):
        with pytest.raises(ValidationError, match="type must be one of"):
            _create(assignments, course, now, type="exam")

    def test_rejects_non_positive_points(self, assignments, course, now):
        with pytest.raises(ValidationError, match="points must be positive"):
            _create(assignments, course, now, points=0)

    @pytest.mark.parametrize("points", [float("inf"), float("nan")])
    def test_rejects_non_finite_points(self, assignments, course, now, points):
        with pytest.raises(ValidationError, match="points must be positive"):
            _create(assignments, course, now, points=points)

    def test_get_unknown(self, assignments):
        with pytest.raises(NotFoundError):
            assignments.get("missing")


@pytest.mark.unit
class TestSubmitAndGrade:
    def test_submit_then_grade(self, assignments, course, student, now):
        a = _create(assignments, course, now)
        sub = assignments.submit(assignment_id=a.id, student_id=student.id, content="draft", now=now)
        assert sub.status == "submitted"
        assert sub.grade is None
        assert sub.submitted_at == now

        graded = assignments.grade(submission_id=sub.id, grade=87, feedback="Nice", now=now + timedelta(hours=1))
        assert graded.status == "graded"
        assert graded.grade == 87.0
        assert graded.feedback == "Nice"
        assert graded.graded_at == now + timedelta(hours=1)

    def test_late_submission_accepted(self, assignments, course, student, now):
        a = _create(assignments, course, now, due_at=now - timedelta(days=1))
        sub = assignments.submit(assignment_id=a.id, student_id=student.id, content="late", now=now)
        assert sub.status == "submitted"

    def test_resubmit_replaces_content(self, assignments, course, student, now, store):
        a = _create(assignments, course, now)
        first = assignments.submit(assignment_id=a.id, student_id=student.id, content="v1", now=now)
        second = assignments.submit(
            assignment_id=a.id, student_id=student.id, content="v2", now=now + timedelta(minutes=5)
        )
        assert second.id == first.id
        assert second.content == "v2"
        assert store.count(Submission, Submission.assignment_id == a.id) == 1

    def test_resubmit_after_grading_refused(self, assignments, course, student, now):
        a = _create(assignments, course, now)
        sub = assignments.submit(assignment_id=a.id, student_id=student.id, content="v1", now=now)
        assignments.grade(submission_id=sub.id, grade=50)
        with pytest.raises(ValidationError, match="already been graded"):
            assignments.submit(assignment_id=a.id, student_id=student.id, content="v2", now=now)

    def test_submit_unknown_assignment(self, assignments, student):
        with pytest.raises(NotFoundError):
            assignments.submit(assignment_id="missing", student_id=student.id, content="x")

    def test_regrade_overwrites(self, assignments, course, student, now):
        a = _create(assignments, course, now)
        sub = assignments.submit(assignment_id=a.id, student_id=student.id, content="x", now=now)
        assignments.grade(submission_id=sub.id, grade=40)
        again = assignments.grade(submission_id=sub.id, grade=95, feedback="Revised")
        assert again.grade == 95.0
        assert again.feedback == "Revised"

    def test_grade_validation(self, assignments):
        with pytest.raises(ValidationError, match="grade is required"):
            assignments.grade(submission_id="x", grade=None)
        with pytest.raises(ValidationError, match="negative"):
            assignments.grade(submission_id="x", grade=-1)
        with pytest.raises(NotFoundError):
            assignments.grade(submission_id="missing", grade=10)

    @pytest.mark.parametrize("grade", [float("inf"), float("-inf"), float("nan")])
    def test_non_finite_grade_rejected(self, assignments, course, student, now, grade):
        a = _create(assignments, course, now)
        sub = assignments.submit(assignment_id=a.id, student_id=student.id, content="draft", now=now)
        with pytest.raises(ValidationError, match="finite"):
            assignments.grade(submission_id=sub.id, grade=grade)
        assert sub.status == "submitted"
        assert sub.grade is None


@pytest.mark.unit
class TestListings:
    def test_course_list_ordered_by_due(self, assignments, course, now):
        later = _create(assignments, course, now, title="Later", due_at=now + timedelta(days=5))
        sooner = _create(assignments, course, now, title="Sooner", due_at=now + timedelta(days=1))
        assert [a.id for a in assignments.list_for_course(course.id)] == [sooner.id, later.id]

    def test_student_sees_status_per_assignment(self, assignments, seed, course, student, now):
        seed.enroll(course, student)
        untouched = _create(assignments, course, now, title="Untouched")
        sent = _create(assignments, course, now, title="Sent", due_at=now + timedelta(days=3))
        marked = _create(assignments, course, now, title="Marked", due_at=now + timedelta(days=4))
        assignments.submit(assignment_id=sent.id, student_id=student.id, content="x", now=now)
        sub = assignments.submit(assignment_id=marked.id, student_id=student.id, content="y", now=now)
        assignments.grade(submission_id=sub.id, grade=70)

        by_id = {a.id: a for a in assignments.list_for_student(student.id)}
        assert by_id[untouched.id].status == "not_started"
        assert by_id[untouched.id].submission is None
        assert by_id[sent.id].status == "submitted"
        assert by_id[marked.id].status == "graded"
        assert by_id[marked.id].submission.grade == 70.0

    def test_student_only_sees_enrolled_and_targeted(self, assignments, seed, teacher, course, student, now):
        other_course = seed.course(teacher, name="Other")
        classmate = seed.user()
        seed.enroll(course, student, classmate)
        visible = _create(assignments, course, now, title="Everyone")
        _create(assignments, course, now, title="Only classmate", assigned_to=[classmate.id])
        _create(assignments, other_course, now, title="Not enrolled")
        assert [a.id for a in assignments.list_for_student(student.id)] == [visible.id]

    def test_student_without_enrollments(self, assignments, student):
        assert assignments.list_for_student(student.id) == []

    def test_teacher_counts(self, assignments, seed, course, now):
        students = [seed.user() for _ in range(5)]
        seed.enroll(course, *students)
        a = _create(assignments, course, now)
        for i, s in enumerate(students):
            sub = assignments.submit(assignment_id=a.id, student_id=s.id, content="x", now=now)
            if i < 2:
                assignments.grade(submission_id=sub.id, grade=80)

        [row] = assignments.list_for_teacher(course.user_id)
        assert row.submitted_count == 5
        assert row.graded_count == 2
        assert row.total_students == 5

    def test_teacher_total_uses_assignees(self, assignments, seed, course, student, now):
        seed.enroll(course, student, seed.user())
        _create(assignments, course, now, assigned_to=[student.id])
        [row] = assignments.list_for_teacher(course.user_id)
        assert row.total_students == 1

    def test_submissions_for_assignment(self, assignments, seed, course, now):
        a = _create(assignments, course, now)
        s1, s2 = seed.user(), seed.user()
        assignments.submit(assignment_id=a.id, student_id=s2.id, content="b", now=now + timedelta(minutes=1))
        assignments.submit(assignment_id=a.id, student_id=s1.id, content="a", now=now)
        assert [s.student_id for s in assignments.list_submissions(a.id)] == [s1.id, s2.id]
