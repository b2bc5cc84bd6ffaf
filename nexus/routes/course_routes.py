"""
Course management and enrollment endpoints.
"""

from fastapi import APIRouter, Depends, Query, status
from sqlalchemy.orm import Session

from nexus.config import get_db
from nexus.schemas.course_schemas import (
    AvailableCourse,
    CourseResponse,
    CreateCourseRequest,
    DeleteCourseResponse,
    EnrolledCourse,
    JoinCourseRequest,
    JoinCourseResponse,
)
from nexus.services.enrollment_service import EnrollmentService
from nexus.services.store import EntityStore

course_routes = APIRouter()


def get_enrollment_service(db: Session = Depends(get_db)) -> EnrollmentService:
    return EnrollmentService(EntityStore(db))


@course_routes.get("", response_model=list[CourseResponse])
def list_courses(
    user_id: str = Query(..., alias="userId", description="Owning teacher id"),
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[CourseResponse]:
    """List all courses owned by a teacher."""
    return [CourseResponse.model_validate(c) for c in service.list_for_teacher(user_id)]


@course_routes.post("", response_model=CourseResponse, status_code=status.HTTP_201_CREATED)
def create_course(
    req: CreateCourseRequest,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> CourseResponse:
    """Create a course; the join code is generated server-side."""
    course = service.create_course(
        teacher_id=req.user_id,
        name=req.name,
        color=req.color,
        description=req.description,
        level=req.level,
        duration=req.duration,
        section=req.section,
        term=req.term,
        syllabus=[w.model_dump() for w in req.syllabus],
    )
    return CourseResponse.model_validate(course)


@course_routes.delete("/{course_id}", response_model=DeleteCourseResponse)
def delete_course(
    course_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> DeleteCourseResponse:
    service.delete_course(course_id)
    return DeleteCourseResponse(msg="Course removed")


@course_routes.get("/available", response_model=list[AvailableCourse])
def list_available_courses(
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[AvailableCourse]:
    """Public catalog for students browsing courses."""
    return service.list_available()


@course_routes.post("/join", response_model=JoinCourseResponse)
def join_course(
    req: JoinCourseRequest,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> JoinCourseResponse:
    course = service.join_by_code(req.code, req.student_id)
    return JoinCourseResponse(message="Successfully enrolled!", course=course)


@course_routes.get("/enrolled/{student_id}", response_model=list[EnrolledCourse])
def list_enrolled_courses(
    student_id: str,
    service: EnrollmentService = Depends(get_enrollment_service),
) -> list[EnrolledCourse]:
    return service.list_enrolled(student_id)
