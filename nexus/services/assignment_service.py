"""
Assignment lifecycle: create, list (per course/student/teacher), submit, grade.

Submission status is a two-state machine stored on the row:

    (no row) --submit--> submitted --grade--> graded --grade--> graded

"not_started" is never stored; it is derived from the absence of a row.
"""

import math
from datetime import datetime
from typing import Optional

from nexus.errors import NotFoundError, ValidationError
from nexus.models.ids import AssignmentId, CourseId, SubmissionId, UserId
from nexus.models.models import Assignment, Course, Enrollment, Submission
from nexus.schemas.assignment_schemas import (
    AssignmentResponse,
    StudentAssignmentResponse,
    SubmissionResponse,
    TeacherAssignmentResponse,
)
from nexus.services.joins import (
    GRADED,
    SUBMITTED,
    derive_status,
    latest_submission_by_assignment,
    submissions_by_assignment,
)
from nexus.services.store import EntityStore
from nexus.utils.common import to_naive_utc
from nexus.utils.logger import configure_logging

logger = configure_logging()

ASSIGNMENT_TYPES = ("quiz", "homework", "project")
DEFAULT_POINTS = 100


def _required(value: Optional[str], field: str) -> str:
    if value is None or (isinstance(value, str) and not value.strip()):
        raise ValidationError(f"{field} is required")
    return value.strip() if isinstance(value, str) else value


def assigned_to_student(assignment: Assignment, student_id: str) -> bool:
    """An empty assignee list targets the whole course roster."""
    targets = assignment.assigned_to or []
    return not targets or student_id in targets


class AssignmentService:
    """Service for the assignment/submission lifecycle."""

    def __init__(self, store: EntityStore):
        self.store = store

    def create(
        self,
        *,
        teacher_id: Optional[UserId],
        course_id: Optional[CourseId],
        title: Optional[str],
        due_at: Optional[datetime],
        description: Optional[str] = None,
        type: str = "homework",
        points: Optional[float] = None,
        assigned_to: Optional[list[str]] = None,
        attachments: Optional[list[dict]] = None,
    ) -> Assignment:
        title = _required(title, "title")
        course_id = _required(course_id, "courseId")
        teacher_id = _required(teacher_id, "teacherId")
        if due_at is None:
            raise ValidationError("dueAt is required")
        if type not in ASSIGNMENT_TYPES:
            raise ValidationError(f"type must be one of {', '.join(ASSIGNMENT_TYPES)}")
        if points is None:
            points = DEFAULT_POINTS
        if not math.isfinite(points) or points <= 0:
            raise ValidationError("points must be positive")

        assignment = Assignment(
            title=title,
            description=description,
            course_id=course_id,
            teacher_id=teacher_id,
            due_at=to_naive_utc(due_at),
            type=type,
            points=points,
            attachments=list(attachments or []),
            assigned_to=list(dict.fromkeys(assigned_to or [])),
        )
        self.store.save(assignment)
        logger.info("assignment created id=%s course=%s teacher=%s", assignment.id, course_id, teacher_id)
        return assignment

    def get(self, assignment_id: AssignmentId) -> Assignment:
        assignment = self.store.get(Assignment, assignment_id)
        if assignment is None:
            raise NotFoundError("Assignment not found")
        return assignment

    def list_for_course(self, course_id: CourseId) -> list[Assignment]:
        return self.store.find(
            Assignment,
            Assignment.course_id == course_id,
            order_by=(Assignment.due_at.asc(), Assignment.id.asc()),
        )

    def list_for_student(self, student_id: UserId) -> list[StudentAssignmentResponse]:
        """Assignments of the student's enrolled courses, each with its derived submission status."""
        course_ids = [
            e.course_id for e in self.store.find(Enrollment, Enrollment.student_id == student_id)
        ]
        if not course_ids:
            return []
        assignments = self.store.find(
            Assignment,
            Assignment.course_id.in_(course_ids),
            order_by=(Assignment.due_at.asc(), Assignment.id.asc()),
        )
        assignments = [a for a in assignments if assigned_to_student(a, student_id)]
        subs = latest_submission_by_assignment(
            self.store.find(Submission, Submission.student_id == student_id)
        )

        result: list[StudentAssignmentResponse] = []
        for a in assignments:
            sub = subs.get(a.id)
            base = AssignmentResponse.model_validate(a).model_dump()
            result.append(
                StudentAssignmentResponse(
                    **base,
                    status=derive_status(sub),
                    submission=SubmissionResponse.model_validate(sub) if sub else None,
                )
            )
        return result

    def list_for_teacher(self, teacher_id: UserId) -> list[TeacherAssignmentResponse]:
        assignments = self.store.find(
            Assignment,
            Assignment.teacher_id == teacher_id,
            order_by=(Assignment.due_at.asc(), Assignment.id.asc()),
        )
        if not assignments:
            return []
        by_assignment = submissions_by_assignment(
            self.store.find(Submission, Submission.assignment_id.in_([a.id for a in assignments]))
        )
        courses = {
            c.id: c
            for c in self.store.find(Course, Course.id.in_(sorted({a.course_id for a in assignments})))
        }

        result: list[TeacherAssignmentResponse] = []
        for a in assignments:
            subs = by_assignment.get(a.id, [])
            course = courses.get(a.course_id)
            roster = len(course.students) if course is not None else 0
            base = AssignmentResponse.model_validate(a).model_dump()
            result.append(
                TeacherAssignmentResponse(
                    **base,
                    submitted_count=len(subs),
                    graded_count=sum(1 for s in subs if s.status == GRADED),
                    total_students=len(a.assigned_to or []) or roster,
                )
            )
        return result

    def list_submissions(self, assignment_id: AssignmentId) -> list[Submission]:
        return self.store.find(
            Submission,
            Submission.assignment_id == assignment_id,
            order_by=(Submission.submitted_at.asc(),),
        )

    def submit(
        self,
        *,
        assignment_id: Optional[AssignmentId],
        student_id: Optional[UserId],
        content: Optional[str],
        attachments: Optional[list[dict]] = None,
        now: Optional[datetime] = None,
    ) -> Submission:
        """
        Record a student's work. Late work is accepted. Sending again before
        grading replaces the earlier content; sending after grading is refused.
        """
        assignment_id = _required(assignment_id, "assignmentId")
        student_id = _required(student_id, "studentId")
        self.get(assignment_id)
        now = now or datetime.utcnow()

        existing = self.store.first(
            Submission,
            Submission.assignment_id == assignment_id,
            Submission.student_id == student_id,
        )
        if existing is not None:
            if existing.status == GRADED:
                raise ValidationError("Submission has already been graded")
            existing.content = content
            existing.attachments = list(attachments or [])
            existing.submitted_at = now
            self.store.save(existing)
            logger.info("submission replaced id=%s assignment=%s student=%s", existing.id, assignment_id, student_id)
            return existing

        submission = Submission(
            assignment_id=assignment_id,
            student_id=student_id,
            content=content,
            attachments=list(attachments or []),
            status=SUBMITTED,
            submitted_at=now,
        )
        self.store.save(submission)
        logger.info("submission created id=%s assignment=%s student=%s", submission.id, assignment_id, student_id)
        return submission

    def grade(
        self,
        *,
        submission_id: Optional[SubmissionId],
        grade: Optional[float],
        feedback: Optional[str] = None,
        now: Optional[datetime] = None,
    ) -> Submission:
        submission_id = _required(submission_id, "submissionId")
        if grade is None:
            raise ValidationError("grade is required")
        if not math.isfinite(grade):
            raise ValidationError("grade must be a finite number")
        if grade < 0:
            raise ValidationError("grade cannot be negative")

        submission = self.store.get(Submission, submission_id)
        if submission is None:
            raise NotFoundError("Submission not found")

        submission.grade = float(grade)
        submission.feedback = feedback
        submission.status = GRADED
        submission.graded_at = now or datetime.utcnow()
        self.store.save(submission)
        logger.info("submission graded id=%s grade=%s", submission.id, submission.grade)
        return submission
