"""
Assignment lifecycle endpoints.
"""

from fastapi import APIRouter, Depends, status
from sqlalchemy.orm import Session

from nexus.config import get_db
from nexus.schemas.assignment_schemas import (
    AssignmentResponse,
    CreateAssignmentRequest,
    GradeRequest,
    StudentAssignmentResponse,
    SubmissionResponse,
    SubmitRequest,
    TeacherAssignmentResponse,
)
from nexus.services.assignment_service import AssignmentService
from nexus.services.store import EntityStore

assignment_routes = APIRouter()


def get_assignment_service(db: Session = Depends(get_db)) -> AssignmentService:
    return AssignmentService(EntityStore(db))


@assignment_routes.post("", response_model=AssignmentResponse, status_code=status.HTTP_201_CREATED)
def create_assignment(
    req: CreateAssignmentRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    assignment = service.create(
        teacher_id=req.teacher_id,
        course_id=req.course_id,
        title=req.title,
        due_at=req.due_at,
        description=req.description,
        type=req.type,
        points=req.points,
        assigned_to=req.assigned_to,
        attachments=[a.model_dump() for a in req.attachments],
    )
    return AssignmentResponse.model_validate(assignment)


@assignment_routes.get("/course/{course_id}", response_model=list[AssignmentResponse])
def list_course_assignments(
    course_id: str,
    service: AssignmentService = Depends(get_assignment_service),
) -> list[AssignmentResponse]:
    return [AssignmentResponse.model_validate(a) for a in service.list_for_course(course_id)]


@assignment_routes.get("/student/{student_id}", response_model=list[StudentAssignmentResponse])
def list_student_assignments(
    student_id: str,
    service: AssignmentService = Depends(get_assignment_service),
) -> list[StudentAssignmentResponse]:
    """Assignments of the student's enrolled courses with status (not_started|submitted|graded)."""
    return service.list_for_student(student_id)


@assignment_routes.get("/teacher/{teacher_id}", response_model=list[TeacherAssignmentResponse])
def list_teacher_assignments(
    teacher_id: str,
    service: AssignmentService = Depends(get_assignment_service),
) -> list[TeacherAssignmentResponse]:
    return service.list_for_teacher(teacher_id)


@assignment_routes.post("/submit", response_model=SubmissionResponse, status_code=status.HTTP_201_CREATED)
def submit_assignment(
    req: SubmitRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> SubmissionResponse:
    submission = service.submit(
        assignment_id=req.assignment_id,
        student_id=req.student_id,
        content=req.content,
        attachments=[a.model_dump(exclude_none=True) for a in req.attachments],
    )
    return SubmissionResponse.model_validate(submission)


@assignment_routes.post("/grade", response_model=SubmissionResponse)
def grade_submission(
    req: GradeRequest,
    service: AssignmentService = Depends(get_assignment_service),
) -> SubmissionResponse:
    submission = service.grade(submission_id=req.submission_id, grade=req.grade, feedback=req.feedback)
    return SubmissionResponse.model_validate(submission)


@assignment_routes.get("/{assignment_id}", response_model=AssignmentResponse)
def get_assignment(
    assignment_id: str,
    service: AssignmentService = Depends(get_assignment_service),
) -> AssignmentResponse:
    return AssignmentResponse.model_validate(service.get(assignment_id))


@assignment_routes.get("/{assignment_id}/submissions", response_model=list[SubmissionResponse])
def list_assignment_submissions(
    assignment_id: str,
    service: AssignmentService = Depends(get_assignment_service),
) -> list[SubmissionResponse]:
    return [SubmissionResponse.model_validate(s) for s in service.list_submissions(assignment_id)]
