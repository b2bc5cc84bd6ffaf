"""
Course, catalog and enrollment schemas.
"""

from datetime import datetime
from typing import Optional

from nexus.schemas.base import CamelModel


class SyllabusWeek(CamelModel):
    week: int
    topic: str
    content: Optional[str] = None


class CreateCourseRequest(CamelModel):
    user_id: Optional[str] = None
    name: Optional[str] = None
    color: Optional[str] = None
    description: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[str] = None
    section: Optional[str] = None
    term: Optional[str] = None
    syllabus: list[SyllabusWeek] = []


class CourseResponse(CamelModel):
    id: str
    user_id: str
    name: str
    code: str
    color: str
    description: Optional[str] = None
    level: Optional[str] = None
    duration: Optional[str] = None
    section: Optional[str] = None
    term: Optional[str] = None
    syllabus: list[SyllabusWeek] = []
    students: list[str] = []
    created_at: datetime


class DeleteCourseResponse(CamelModel):
    msg: str


class AvailableCourse(CamelModel):
    """Public catalog entry; never carries the roster itself."""
    id: str
    name: str
    code: str
    description: str
    level: str
    duration: str
    teacher_id: str
    students_count: int
    created_at: datetime


class EnrolledCourse(CamelModel):
    id: str
    name: str
    code: str
    description: str
    level: str
    duration: str
    teacher_id: str
    color: str


class JoinCourseRequest(CamelModel):
    code: Optional[str] = None
    student_id: Optional[str] = None


class CourseSummary(CamelModel):
    id: str
    name: str
    code: str


class JoinCourseResponse(CamelModel):
    message: str
    course: CourseSummary
