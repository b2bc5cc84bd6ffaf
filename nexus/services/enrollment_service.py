"""
Course management and enrollment by join code.
"""

from typing import Optional

from nexus.errors import AlreadyEnrolledError, NotFoundError, StorageError, ValidationError
from nexus.models.ids import CourseId, UserId
from nexus.models.models import Course, Enrollment
from nexus.schemas.course_schemas import AvailableCourse, CourseSummary, EnrolledCourse
from nexus.services.store import EntityStore
from nexus.utils.common import generate_join_code, normalize_join_code
from nexus.utils.logger import configure_logging

logger = configure_logging()

DEFAULT_COLOR = "#8b5cf6"
DEFAULT_LEVEL = "General"
DEFAULT_DURATION = "Self-paced"
MAX_CODE_ATTEMPTS = 5


class EnrollmentService:
    """Courses, the public catalog and the enrollment roster."""

    def __init__(self, store: EntityStore):
        self.store = store

    def create_course(
        self,
        *,
        teacher_id: Optional[UserId],
        name: Optional[str],
        color: Optional[str] = None,
        description: Optional[str] = None,
        level: Optional[str] = None,
        duration: Optional[str] = None,
        section: Optional[str] = None,
        term: Optional[str] = None,
        syllabus: Optional[list[dict]] = None,
    ) -> Course:
        if not teacher_id:
            raise ValidationError("userId is required")
        if not name or not name.strip():
            raise ValidationError("name is required")

        for attempt in range(1, MAX_CODE_ATTEMPTS + 1):
            code = generate_join_code()
            if self.store.first(Course, Course.code == code) is not None:
                logger.debug("join code collision code=%s attempt=%s", code, attempt)
                continue
            course = Course(
                user_id=teacher_id,
                name=name.strip(),
                code=code,
                color=color or DEFAULT_COLOR,
                description=description,
                level=level,
                duration=duration,
                section=section,
                term=term,
                syllabus=list(syllabus or []),
            )
            self.store.save(course)
            logger.info("course created id=%s code=%s teacher=%s", course.id, code, teacher_id)
            return course
        raise StorageError("Could not allocate a unique join code")

    def list_for_teacher(self, teacher_id: UserId) -> list[Course]:
        return self.store.find(
            Course,
            Course.user_id == teacher_id,
            order_by=(Course.created_at.desc(), Course.id.asc()),
        )

    def delete_course(self, course_id: CourseId) -> None:
        course = self.store.get(Course, course_id)
        if course is None:
            raise NotFoundError("Course not found")
        self.store.delete(course)
        logger.info("course deleted id=%s", course_id)

    def join_by_code(self, code: Optional[str], student_id: Optional[UserId]) -> CourseSummary:
        code = normalize_join_code(code)
        if not code or not student_id:
            raise ValidationError("Course code and student ID required")

        course = self.store.first(Course, Course.code == code)
        if course is None:
            raise NotFoundError("Course not found. Check the code and try again.")

        if student_id in course.students:
            raise AlreadyEnrolledError("Already enrolled in this course")

        # A concurrent join can pass the check above; the unique constraint
        # on (course_id, student_id) rejects the second insert.
        self.store.save(
            Enrollment(course_id=course.id, student_id=student_id),
            conflict=AlreadyEnrolledError("Already enrolled in this course"),
        )
        logger.info("student enrolled course=%s student=%s", course.id, student_id)
        return CourseSummary(id=course.id, name=course.name, code=course.code)

    def list_available(self) -> list[AvailableCourse]:
        courses = self.store.find(Course, order_by=(Course.created_at.asc(), Course.id.asc()))
        return [
            AvailableCourse(
                id=c.id,
                name=c.name,
                code=c.code,
                description=c.description or "",
                level=c.level or DEFAULT_LEVEL,
                duration=c.duration or DEFAULT_DURATION,
                teacher_id=c.user_id,
                students_count=len(c.enrollments),
                created_at=c.created_at,
            )
            for c in courses
        ]

    def enrolled_courses(self, student_id: UserId) -> list[Course]:
        course_ids = [
            e.course_id for e in self.store.find(Enrollment, Enrollment.student_id == student_id)
        ]
        if not course_ids:
            return []
        return self.store.find(
            Course,
            Course.id.in_(course_ids),
            order_by=(Course.created_at.asc(), Course.id.asc()),
        )

    def list_enrolled(self, student_id: UserId) -> list[EnrolledCourse]:
        return [
            EnrolledCourse(
                id=c.id,
                name=c.name,
                code=c.code,
                description=c.description or "",
                level=c.level or DEFAULT_LEVEL,
                duration=c.duration or DEFAULT_DURATION,
                teacher_id=c.user_id,
                color=c.color or DEFAULT_COLOR,
            )
            for c in self.enrolled_courses(student_id)
        ]
