"""
API data models. Single import surface for DB entities and typed ids.

DB entities (nexus.models.models):
- User, Course, Enrollment, Assignment, Submission, Mastery, Progress

Identifiers (nexus.models.ids):
- UserId, CourseId, AssignmentId, SubmissionId, new_id
"""

from nexus.models.models import (
    User,
    Course,
    Enrollment,
    Assignment,
    Submission,
    Mastery,
    Progress,
)
from nexus.models.ids import UserId, CourseId, AssignmentId, SubmissionId, new_id

__all__ = [
    "User",
    "Course",
    "Enrollment",
    "Assignment",
    "Submission",
    "Mastery",
    "Progress",
    "UserId",
    "CourseId",
    "AssignmentId",
    "SubmissionId",
    "new_id",
]
