from nexus.config import Base
from nexus.models.ids import new_id
from sqlalchemy import (
    Column,
    String,
    JSON,
    DateTime,
    ForeignKey,
    Text,
    Float,
    Integer,
    CheckConstraint,
    UniqueConstraint,
)
from sqlalchemy.orm import relationship
from datetime import datetime


class User(Base):
    __tablename__ = "users"
    id = Column(String, primary_key=True, index=True, default=new_id)
    email = Column(String, unique=True, index=True, nullable=False)
    hashed_password = Column(String, nullable=False)
    display_name = Column(String, nullable=True)
    institution = Column(String, nullable=True)
    role = Column(String, nullable=False, default="student")  # student|teacher
    primary_subject = Column(String, nullable=True)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Course(Base):
    __tablename__ = "courses"
    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)  # owning teacher
    name = Column(String, nullable=False)
    code = Column(String(6), unique=True, index=True, nullable=False)
    color = Column(String, default="#8b5cf6", nullable=False)
    description = Column(Text, nullable=True)
    level = Column(String, nullable=True)
    duration = Column(String, nullable=True)
    section = Column(String, nullable=True)
    term = Column(String, nullable=True)
    syllabus = Column(JSON, default=list, nullable=True)  # list of {week, topic, content}
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    enrollments = relationship(
        "Enrollment",
        backref="course",
        cascade="all, delete-orphan",
        order_by="Enrollment.created_at",
    )

    @property
    def students(self) -> list[str]:
        return [e.student_id for e in self.enrollments]


class Enrollment(Base):
    __tablename__ = "enrollments"
    id = Column(String, primary_key=True, index=True, default=new_id)
    course_id = Column(String, ForeignKey("courses.id", ondelete="CASCADE"), index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("course_id", "student_id", name="uq_enrollment_course_student"),
    )


class Assignment(Base):
    __tablename__ = "assignments"
    id = Column(String, primary_key=True, index=True, default=new_id)
    title = Column(String, nullable=False)
    description = Column(Text, nullable=True)
    course_id = Column(String, index=True, nullable=False)
    teacher_id = Column(String, index=True, nullable=False)
    due_at = Column(DateTime, nullable=False)
    type = Column(String, nullable=False, default="homework")  # quiz|homework|project
    points = Column(Float, nullable=False, default=100)
    attachments = Column(JSON, default=list, nullable=True)  # list of {name, url, type}
    assigned_to = Column(JSON, default=list, nullable=True)  # list of student ids; empty = whole course
    created_at = Column(DateTime, default=datetime.utcnow, nullable=False)


class Submission(Base):
    __tablename__ = "assignment_submissions"
    id = Column(String, primary_key=True, index=True, default=new_id)
    assignment_id = Column(String, index=True, nullable=False)
    student_id = Column(String, index=True, nullable=False)
    content = Column(Text, nullable=True)
    attachments = Column(JSON, default=list, nullable=True)  # list of {name, url}
    status = Column(String, nullable=False, default="submitted")  # submitted|graded
    grade = Column(Float, nullable=True)
    feedback = Column(Text, nullable=True)
    submitted_at = Column(DateTime, default=datetime.utcnow, nullable=False)
    graded_at = Column(DateTime, nullable=True)

    __table_args__ = (
        UniqueConstraint("assignment_id", "student_id", name="uq_submission_assignment_student"),
        CheckConstraint(
            "(status = 'graded' AND grade IS NOT NULL) OR (status = 'submitted' AND grade IS NULL)",
            name="ck_submission_grade_status",
        ),
    )


class Mastery(Base):
    __tablename__ = "mastery"
    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, index=True, nullable=False)
    topic = Column(String, nullable=False)
    score = Column(Float, nullable=False, default=50.0)
    confidence = Column(Float, nullable=False, default=0.5)
    last_updated = Column(DateTime, default=datetime.utcnow, nullable=False)

    __table_args__ = (
        UniqueConstraint("user_id", "topic", name="uq_mastery_user_topic"),
        CheckConstraint("score >= 0 AND score <= 100", name="ck_mastery_score_range"),
        CheckConstraint("confidence >= 0 AND confidence <= 1", name="ck_mastery_confidence_range"),
    )


class Progress(Base):
    __tablename__ = "progress"
    id = Column(String, primary_key=True, index=True, default=new_id)
    user_id = Column(String, unique=True, index=True, nullable=False)
    level = Column(Integer, nullable=False, default=1)
    xp = Column(Integer, nullable=False, default=0)
    streak = Column(Integer, nullable=False, default=0)
    last_active_date = Column(DateTime, nullable=True)
    goals = Column(JSON, default=list, nullable=True)  # list of {text, completed}
    challenges = Column(JSON, default=list, nullable=True)  # list of {id, title, completed}
