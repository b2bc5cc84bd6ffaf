"""
Assignment and submission schemas.
"""

from datetime import datetime
from typing import Literal, Optional

from pydantic import FiniteFloat

from nexus.schemas.base import CamelModel

AssignmentType = Literal["quiz", "homework", "project"]


class Attachment(CamelModel):
    name: str
    url: str
    type: Optional[str] = None


class CreateAssignmentRequest(CamelModel):
    # Required fields are Optional here so a missing one surfaces as the
    # domain ValidationError (400) rather than a schema error.
    title: Optional[str] = None
    description: Optional[str] = None
    course_id: Optional[str] = None
    teacher_id: Optional[str] = None
    due_at: Optional[datetime] = None
    type: AssignmentType = "homework"
    points: Optional[FiniteFloat] = None
    attachments: list[Attachment] = []
    assigned_to: list[str] = []


class AssignmentResponse(CamelModel):
    id: str
    title: str
    description: Optional[str] = None
    course_id: str
    teacher_id: str
    due_at: datetime
    type: AssignmentType
    points: float
    attachments: list[Attachment] = []
    assigned_to: list[str] = []
    created_at: datetime


class SubmissionResponse(CamelModel):
    id: str
    assignment_id: str
    student_id: str
    content: Optional[str] = None
    attachments: list[Attachment] = []
    status: Literal["submitted", "graded"]
    grade: Optional[float] = None
    feedback: Optional[str] = None
    submitted_at: datetime
    graded_at: Optional[datetime] = None


class StudentAssignmentResponse(AssignmentResponse):
    status: str  # not_started|submitted|graded
    submission: Optional[SubmissionResponse] = None


class TeacherAssignmentResponse(AssignmentResponse):
    submitted_count: int
    graded_count: int
    total_students: int


class SubmitRequest(CamelModel):
    assignment_id: Optional[str] = None
    student_id: Optional[str] = None
    content: Optional[str] = None
    attachments: list[Attachment] = []


class GradeRequest(CamelModel):
    submission_id: Optional[str] = None
    grade: Optional[FiniteFloat] = None
    feedback: Optional[str] = None
