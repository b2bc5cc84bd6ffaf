"""
Role-specific dashboards, recomputed per request.

Each view first resolves the User (missing -> NotFoundError), then pulls its
collections through `_fetch`. A failed sub-fetch is logged and treated as an
empty collection, so a storage hiccup degrades the dashboard instead of
failing it.
"""

from __future__ import annotations

from collections import defaultdict
from datetime import datetime, timedelta
from typing import Callable, Optional, TypeVar

from sqlalchemy.exc import SQLAlchemyError

from nexus.errors import NotFoundError, StorageError
from nexus.models.ids import UserId
from nexus.models.models import Assignment, Course, Enrollment, Progress, Submission, User
from nexus.schemas.dashboard_schemas import (
    AtRiskStudent,
    GradedResult,
    SidebarCourse,
    StudentDashboard,
    StudentStats,
    TeacherAssignmentRow,
    TeacherCourseRow,
    TeacherDashboard,
    TeacherOverview,
    TodayTask,
)
from nexus.services.assignment_service import assigned_to_student
from nexus.services.insight_service import templated_insight
from nexus.services.joins import (
    GRADED,
    PENDING,
    SUBMITTED,
    derive_status,
    index_by_id,
    is_graded,
    latest_submission_by_assignment,
    percent,
    score_ratio,
    submissions_by_assignment,
)
from nexus.services.store import EntityStore
from nexus.utils.common import greeting
from nexus.utils.logger import configure_logging, log_request

logger = configure_logging()

T = TypeVar("T")

TODAY_LIMIT = 6
RECENT_GRADED_LIMIT = 3
ASSIGNMENT_ROWS_LIMIT = 10
AT_RISK_LIMIT = 5
AT_RISK_THRESHOLD = 0.6
URGENT_WINDOW = timedelta(hours=48)
DEFAULT_COLOR = "#8b5cf6"
DEFAULT_SECTION = "A"


class DashboardService:
    def __init__(self, store: EntityStore):
        self.store = store

    def _fetch(self, label: str, fn: Callable[[], T], empty: T) -> T:
        try:
            return fn()
        except (StorageError, SQLAlchemyError) as e:
            self.store.db.rollback()
            logger.warning("dashboard sub-fetch failed part=%s error=%s; continuing with empty result", label, e)
            return empty

    def _user(self, user_id: UserId) -> User:
        user = self.store.get(User, user_id)
        if user is None:
            raise NotFoundError("User not found")
        return user

    # ----- student -----

    def _enrolled_courses(self, student_id: UserId) -> list[Course]:
        ids = [e.course_id for e in self.store.find(Enrollment, Enrollment.student_id == student_id)]
        if not ids:
            return []
        return self.store.find(Course, Course.id.in_(ids), order_by=(Course.created_at.asc(), Course.id.asc()))

    def student_view(self, user_id: UserId, now: Optional[datetime] = None) -> StudentDashboard:
        now = now or datetime.utcnow()
        with log_request(logger, "dashboard.student", user=user_id):
            user = self._user(user_id)
            courses = self._fetch("courses", lambda: self._enrolled_courses(user_id), [])
            course_ids = [c.id for c in courses]
            assignments = self._fetch(
                "assignments",
                lambda: self.store.find(
                    Assignment,
                    Assignment.course_id.in_(course_ids),
                    order_by=(Assignment.due_at.asc(), Assignment.id.asc()),
                ) if course_ids else [],
                [],
            )
            assignments = [a for a in assignments if assigned_to_student(a, user_id)]
            submissions = self._fetch(
                "submissions",
                lambda: self.store.find(Submission, Submission.student_id == user_id),
                [],
            )
            progress = self._fetch(
                "progress",
                lambda: self.store.first(Progress, Progress.user_id == user_id),
                None,
            )
            return self._compose_student(user, courses, assignments, submissions, progress, now)

    def _compose_student(
        self,
        user: User,
        courses: list[Course],
        assignments: list[Assignment],
        submissions: list[Submission],
        progress: Optional[Progress],
        now: datetime,
    ) -> StudentDashboard:
        courses_by_id = index_by_id(courses)
        assignments_by_id = index_by_id(assignments)
        sub_by_assignment = latest_submission_by_assignment(submissions)

        completed_count = sum(1 for s in submissions if s.status in (SUBMITTED, GRADED))
        earned, possible = score_ratio([s for s in submissions if is_graded(s)], assignments_by_id)
        avg_score = percent(earned, possible) or 0

        today: list[TodayTask] = []
        for a in assignments:
            sub = sub_by_assignment.get(a.id)
            status = derive_status(sub, missing=PENDING)
            if status == GRADED or a.due_at <= now:
                continue
            course = courses_by_id.get(a.course_id)
            today.append(
                TodayTask(
                    id=a.id,
                    title=a.title,
                    type=a.type,
                    course=course.name if course else "Course",
                    course_color=(course.color if course else None) or DEFAULT_COLOR,
                    due_at=a.due_at,
                    points=a.points,
                    is_urgent=a.due_at < now + URGENT_WINDOW,
                    status=status,
                    grade=sub.grade if sub else None,
                )
            )
            if len(today) >= TODAY_LIMIT:
                break

        graded_pairs = [
            (a, sub_by_assignment[a.id])
            for a in assignments
            if is_graded(sub_by_assignment.get(a.id))
        ]
        graded_pairs.sort(key=lambda p: p[1].graded_at or p[1].submitted_at, reverse=True)
        recent_graded = [
            GradedResult(id=a.id, title=a.title, grade=s.grade, points=a.points, feedback=s.feedback)
            for a, s in graded_pairs[:RECENT_GRADED_LIMIT]
        ]

        return StudentDashboard(
            greeting=greeting(user.display_name),
            stats=StudentStats(
                streak=progress.streak if progress else 0,
                mastery=avg_score,
                tasks_count=len(today),
                completed_count=completed_count,
            ),
            avg_score=avg_score,
            courses=[
                SidebarCourse(id=c.id, name=c.name, code=c.code, color=c.color or DEFAULT_COLOR, level=c.level)
                for c in courses
            ],
            today=today,
            recent_graded=recent_graded,
            insight=templated_insight(completed_count, avg_score),
        )

    # ----- teacher -----

    def teacher_view(self, user_id: UserId, now: Optional[datetime] = None) -> TeacherDashboard:
        now = now or datetime.utcnow()
        with log_request(logger, "dashboard.teacher", user=user_id):
            user = self._user(user_id)
            courses = self._fetch(
                "courses",
                lambda: self.store.find(
                    Course, Course.user_id == user_id, order_by=(Course.created_at.asc(), Course.id.asc())
                ),
                [],
            )
            rosters = self._fetch("rosters", lambda: {c.id: list(c.students) for c in courses}, {})
            assignments = self._fetch(
                "assignments",
                lambda: self.store.find(
                    Assignment,
                    Assignment.teacher_id == user_id,
                    order_by=(Assignment.due_at.asc(), Assignment.id.asc()),
                ),
                [],
            )
            assignment_ids = [a.id for a in assignments]
            submissions = self._fetch(
                "submissions",
                lambda: self.store.find(Submission, Submission.assignment_id.in_(assignment_ids))
                if assignment_ids else [],
                [],
            )
            return self._compose_teacher(user, courses, rosters, assignments, submissions, now)

    def _compose_teacher(
        self,
        user: User,
        courses: list[Course],
        rosters: dict[str, list[str]],
        assignments: list[Assignment],
        submissions: list[Submission],
        now: datetime,
    ) -> TeacherDashboard:
        courses_by_id = index_by_id(courses)
        assignments_by_id = index_by_id(assignments)
        by_assignment = submissions_by_assignment(submissions)
        graded = [s for s in submissions if is_graded(s)]

        grading_queue_count = sum(1 for s in submissions if s.status == SUBMITTED)
        active_assignments_count = sum(1 for a in assignments if a.due_at > now)
        total_students = len({sid for roster in rosters.values() for sid in roster})

        course_rows: list[TeacherCourseRow] = []
        for c in courses:
            course_assignments = {a.id: a for a in assignments if a.course_id == c.id}
            earned, possible = score_ratio(
                [s for s in graded if s.assignment_id in course_assignments],
                course_assignments,
            )
            course_rows.append(
                TeacherCourseRow(
                    id=c.id,
                    name=c.name,
                    code=c.code or "N/A",
                    color=c.color or DEFAULT_COLOR,
                    section=c.section or DEFAULT_SECTION,
                    term=c.term,
                    students_count=len(rosters.get(c.id, [])),
                    avg_score=percent(earned, possible),
                )
            )

        assignment_rows: list[TeacherAssignmentRow] = []
        for a in assignments[:ASSIGNMENT_ROWS_LIMIT]:
            subs = by_assignment.get(a.id, [])
            submitted_count = len(subs)
            graded_count = sum(1 for s in subs if s.status == GRADED)
            course = courses_by_id.get(a.course_id)
            assignment_rows.append(
                TeacherAssignmentRow(
                    id=a.id,
                    title=a.title,
                    course_name=course.name if course else "Unknown",
                    course_color=(course.color if course else None) or DEFAULT_COLOR,
                    due_at=a.due_at,
                    points=a.points,
                    type=a.type,
                    status="Active" if a.due_at > now else "Closed",
                    submitted_count=submitted_count,
                    graded_count=graded_count,
                    ungraded_count=submitted_count - graded_count,
                    total_students=len(a.assigned_to or []) or len(rosters.get(a.course_id, [])),
                )
            )

        students_at_risk = self._students_at_risk(graded, assignments_by_id)

        return TeacherDashboard(
            greeting=greeting(user.display_name, fallback="Welcome back, Professor"),
            overview=TeacherOverview(
                course_count=len(courses),
                active_assignments_count=active_assignments_count,
                grading_queue_count=grading_queue_count,
                total_students=total_students,
                students_at_risk_count=len(students_at_risk),
            ),
            courses=course_rows,
            assignments=assignment_rows,
            students_at_risk=students_at_risk,
        )

    @staticmethod
    def _students_at_risk(
        graded: list[Submission],
        assignments_by_id: dict[str, Assignment],
    ) -> list[AtRiskStudent]:
        totals: dict[str, list[float]] = defaultdict(lambda: [0.0, 0.0])
        for s in graded:
            a = assignments_by_id.get(s.assignment_id)
            if a is None:
                continue
            totals[s.student_id][0] += float(s.grade)
            totals[s.student_id][1] += float(a.points)

        flagged = [
            (sid, earned, possible)
            for sid, (earned, possible) in totals.items()
            if possible > 0 and earned / possible < AT_RISK_THRESHOLD
        ]
        flagged.sort(key=lambda t: (t[1] / t[2], t[0]))
        return [
            AtRiskStudent(
                id=sid,
                avg_score=percent(earned, possible) or 0,
                earned=earned,
                possible=possible,
                issue="Low Average Score",
            )
            for sid, earned, possible in flagged[:AT_RISK_LIMIT]
        ]
