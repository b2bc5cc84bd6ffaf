"""
Join helpers for value-equality references.

Assignments point at courses and submissions point at assignments by plain
string id, with no referential integrity. These helpers build the lookups the
services join through and make the "referenced row is missing" case explicit
(a missing key yields None, never an exception).
"""

from __future__ import annotations

import math
from collections import defaultdict
from typing import Iterable, Optional

from nexus.models.ids import AssignmentId
from nexus.models.models import Assignment, Submission

SUBMITTED = "submitted"
GRADED = "graded"
NOT_STARTED = "not_started"
PENDING = "pending"


def index_by_id(rows: Iterable) -> dict:
    return {r.id: r for r in rows}


def submissions_by_assignment(submissions: Iterable[Submission]) -> dict[AssignmentId, list[Submission]]:
    grouped: dict[AssignmentId, list[Submission]] = defaultdict(list)
    for s in submissions:
        grouped[AssignmentId(s.assignment_id)].append(s)
    return grouped


def latest_submission_by_assignment(submissions: Iterable[Submission]) -> dict[AssignmentId, Submission]:
    """One submission per assignment; the most recent wins if the store holds several."""
    out: dict[AssignmentId, Submission] = {}
    for s in sorted(submissions, key=lambda s: s.submitted_at):
        out[AssignmentId(s.assignment_id)] = s
    return out


def is_graded(submission: Optional[Submission]) -> bool:
    return submission is not None and submission.status == GRADED and submission.grade is not None


def derive_status(submission: Optional[Submission], *, missing: str = NOT_STARTED) -> str:
    """Status of an (assignment, student) pair. No row means the work was never sent."""
    if submission is None:
        return missing
    return submission.status


def score_ratio(
    graded: Iterable[Submission],
    assignments: dict[str, Assignment],
) -> tuple[float, float]:
    """
    Sum (earned, possible) over graded submissions whose assignment is known.
    A submission whose assignment is not in `assignments` counts on neither side.
    """
    earned = 0.0
    possible = 0.0
    for s in graded:
        a = assignments.get(s.assignment_id)
        if a is None or not is_graded(s):
            continue
        earned += float(s.grade)
        possible += float(a.points)
    return earned, possible


def percent(earned: float, possible: float) -> Optional[int]:
    if possible <= 0:
        return None
    # Half-up rounding; built-in round() would send 69.5 to 70 but 68.5 to 68.
    return int(math.floor(100 * earned / possible + 0.5))
