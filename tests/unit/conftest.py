"""
Unit test fixtures. Services run against the in-memory DB from the root
conftest; no HTTP and no real LLM.
"""
import pytest

from nexus.services.assignment_service import AssignmentService
from nexus.services.dashboard_service import DashboardService
from nexus.services.enrollment_service import EnrollmentService
from nexus.services.tracking_service import TrackingService


@pytest.fixture
def assignments(store):
    return AssignmentService(store)


@pytest.fixture
def enrollment(store):
    return EnrollmentService(store)


@pytest.fixture
def dashboards(store):
    return DashboardService(store)


@pytest.fixture
def tracking(store):
    return TrackingService(store)
