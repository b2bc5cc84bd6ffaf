"""
Role-specific dashboard view models. Built fresh on every request by
nexus.services.dashboard_service; nothing here is persisted.
"""

from datetime import datetime
from typing import Optional

from nexus.schemas.base import CamelModel


class StudentStats(CamelModel):
    streak: int
    mastery: int
    tasks_count: int
    completed_count: int


class SidebarCourse(CamelModel):
    id: str
    name: str
    code: str
    color: str
    level: Optional[str] = None


class TodayTask(CamelModel):
    id: str
    title: str
    type: str
    course: str
    course_color: str
    due_at: datetime
    points: float
    is_urgent: bool
    status: str  # pending|submitted
    grade: Optional[float] = None


class GradedResult(CamelModel):
    id: str
    title: str
    grade: float
    points: float
    feedback: Optional[str] = None


class Insight(CamelModel):
    title: str
    message: str


class StudentDashboard(CamelModel):
    greeting: str
    stats: StudentStats
    avg_score: int
    courses: list[SidebarCourse]
    today: list[TodayTask]
    recent_graded: list[GradedResult]
    insight: Insight


class TeacherOverview(CamelModel):
    course_count: int
    active_assignments_count: int
    grading_queue_count: int
    total_students: int
    students_at_risk_count: int


class TeacherCourseRow(CamelModel):
    id: str
    name: str
    code: str
    color: str
    section: str
    term: Optional[str] = None
    students_count: int
    avg_score: Optional[int] = None


class TeacherAssignmentRow(CamelModel):
    id: str
    title: str
    course_name: str
    course_color: str
    due_at: datetime
    points: float
    type: str
    status: str  # Active|Closed
    submitted_count: int
    graded_count: int
    ungraded_count: int
    total_students: int


class AtRiskStudent(CamelModel):
    id: str
    avg_score: int
    earned: float
    possible: float
    issue: str


class TeacherDashboard(CamelModel):
    greeting: str
    overview: TeacherOverview
    courses: list[TeacherCourseRow]
    assignments: list[TeacherAssignmentRow]
    students_at_risk: list[AtRiskStudent]
