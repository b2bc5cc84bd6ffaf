"""
Pytest configuration and shared fixtures for the test suite.
Points settings at throwaway locations before anything imports nexus, and
provides an in-memory database plus small factories for seeding entities.
"""
import os
import sys
import tempfile
from datetime import datetime, timedelta
from pathlib import Path

os.environ.setdefault("DATABASE_URL", "sqlite://")
os.environ.setdefault("LOG_DIR", os.path.join(tempfile.gettempdir(), "nexus-test-logs"))
os.environ.setdefault("INSIGHT_LLM_ENABLED", "false")

import pytest
from sqlalchemy import create_engine
from sqlalchemy.orm import sessionmaker
from sqlalchemy.pool import StaticPool

# Add project root to Python path for imports
project_root = Path(__file__).parent.parent
if str(project_root) not in sys.path:
    sys.path.insert(0, str(project_root))

NOW = datetime(2026, 3, 2, 12, 0, 0)


# ----- In-memory DB (for tests that need DB without touching real DB) -----
@pytest.fixture
def in_memory_engine():
    import nexus.models  # noqa: F401
    from nexus.config import Base

    engine = create_engine(
        "sqlite://",
        connect_args={"check_same_thread": False},
        poolclass=StaticPool,
    )
    Base.metadata.create_all(engine)
    yield engine
    engine.dispose()


@pytest.fixture
def db_session(in_memory_engine):
    SessionLocal = sessionmaker(bind=in_memory_engine, autoflush=False)
    session = SessionLocal()
    yield session
    session.close()


@pytest.fixture
def store(db_session):
    from nexus.services.store import EntityStore
    return EntityStore(db_session)


class Seed:
    """Writes entities straight through the session, bypassing service rules."""

    def __init__(self, db):
        self.db = db
        self._codes = 0

    def _add(self, obj):
        self.db.add(obj)
        self.db.commit()
        self.db.refresh(obj)
        return obj

    def user(self, role="student", display_name=None, email=None):
        from nexus.models.models import User
        n = self.db.query(User).count() + 1
        return self._add(User(
            email=email or f"{role}{n}@example.com",
            hashed_password="x",
            role=role,
            display_name=display_name,
        ))

    def course(self, teacher, name="Introduction to AI", **kw):
        from nexus.models.models import Course
        self._codes += 1
        kw.setdefault("code", f"C{self._codes:05d}")
        return self._add(Course(user_id=teacher.id, name=name, **kw))

    def enroll(self, course, *students):
        from nexus.models.models import Enrollment
        for s in students:
            self.db.add(Enrollment(course_id=course.id, student_id=s.id))
        self.db.commit()
        self.db.refresh(course)
        return course

    def assignment(self, course, title="Homework", due_in=timedelta(days=3), points=100, now=NOW, **kw):
        from nexus.models.models import Assignment
        return self._add(Assignment(
            title=title,
            course_id=course.id,
            teacher_id=course.user_id,
            due_at=now + due_in,
            points=points,
            **kw,
        ))

    def submission(self, assignment, student, grade=None, feedback=None, submitted_at=None, graded_at=None):
        from nexus.models.models import Submission
        return self._add(Submission(
            assignment_id=assignment.id,
            student_id=student.id,
            content="my answer",
            status="graded" if grade is not None else "submitted",
            grade=grade,
            feedback=feedback,
            submitted_at=submitted_at or NOW - timedelta(days=1),
            graded_at=graded_at if graded_at is not None else (NOW if grade is not None else None),
        ))


@pytest.fixture
def now():
    return NOW


@pytest.fixture
def seed(db_session):
    return Seed(db_session)


@pytest.fixture
def teacher(seed):
    return seed.user(role="teacher", display_name="Sarah Chen")


@pytest.fixture
def student(seed):
    return seed.user(role="student", display_name="Alex Johnson")


@pytest.fixture
def course(seed, teacher):
    return seed.course(teacher, color="#06b6d4", level="Beginner", section="B", term="Spring 2026")
