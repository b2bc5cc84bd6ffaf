"""
API schemas package. Import from submodules or from this package.

Example:
    from nexus.schemas import CourseResponse, StudentDashboard
    from nexus.schemas.course_schemas import CourseResponse
"""

from nexus.schemas.base import CamelModel
from nexus.schemas.auth_schemas import (
    AuthResponse,
    AuthTokenPayload,
    LoginRequest,
    SignupRequest,
    UserResponse,
)
from nexus.schemas.course_schemas import (
    AvailableCourse,
    CourseResponse,
    CourseSummary,
    CreateCourseRequest,
    DeleteCourseResponse,
    EnrolledCourse,
    JoinCourseRequest,
    JoinCourseResponse,
    SyllabusWeek,
)
from nexus.schemas.assignment_schemas import (
    AssignmentResponse,
    Attachment,
    CreateAssignmentRequest,
    GradeRequest,
    StudentAssignmentResponse,
    SubmissionResponse,
    SubmitRequest,
    TeacherAssignmentResponse,
)
from nexus.schemas.dashboard_schemas import (
    AtRiskStudent,
    GradedResult,
    Insight,
    SidebarCourse,
    StudentDashboard,
    StudentStats,
    TeacherAssignmentRow,
    TeacherCourseRow,
    TeacherDashboard,
    TeacherOverview,
    TodayTask,
)
from nexus.schemas.tracking_schemas import (
    Challenge,
    Goal,
    MasteryResponse,
    MasteryUpdateRequest,
    ProgressResponse,
    ProgressUpdateRequest,
)

__all__ = [
    "CamelModel",
    # auth
    "AuthResponse",
    "AuthTokenPayload",
    "LoginRequest",
    "SignupRequest",
    "UserResponse",
    # course
    "AvailableCourse",
    "CourseResponse",
    "CourseSummary",
    "CreateCourseRequest",
    "DeleteCourseResponse",
    "EnrolledCourse",
    "JoinCourseRequest",
    "JoinCourseResponse",
    "SyllabusWeek",
    # assignment
    "AssignmentResponse",
    "Attachment",
    "CreateAssignmentRequest",
    "GradeRequest",
    "StudentAssignmentResponse",
    "SubmissionResponse",
    "SubmitRequest",
    "TeacherAssignmentResponse",
    # dashboard
    "AtRiskStudent",
    "GradedResult",
    "Insight",
    "SidebarCourse",
    "StudentDashboard",
    "StudentStats",
    "TeacherAssignmentRow",
    "TeacherCourseRow",
    "TeacherDashboard",
    "TeacherOverview",
    "TodayTask",
    # tracking
    "Challenge",
    "Goal",
    "MasteryResponse",
    "MasteryUpdateRequest",
    "ProgressResponse",
    "ProgressUpdateRequest",
]
