"""
Typed identifiers. References between entities are stored by value (plain
string columns), so these aliases are what keeps a course id from being
passed where a student id is expected.
"""

from typing import NewType
from uuid import uuid4

UserId = NewType("UserId", str)
CourseId = NewType("CourseId", str)
AssignmentId = NewType("AssignmentId", str)
SubmissionId = NewType("SubmissionId", str)


def new_id() -> str:
    return uuid4().hex
