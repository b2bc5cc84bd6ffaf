"""
Aggregated dashboards for students and teachers.
"""

from fastapi import APIRouter, Depends
from sqlalchemy.orm import Session
from starlette.concurrency import run_in_threadpool

from nexus.config import get_db
from nexus.schemas.dashboard_schemas import StudentDashboard, TeacherDashboard
from nexus.services.dashboard_service import DashboardService
from nexus.services.insight_service import InsightService, default_llm
from nexus.services.store import EntityStore

dashboard_routes = APIRouter()


def get_insight_service() -> InsightService:
    return InsightService(llm=default_llm())


@dashboard_routes.get("/student/{user_id}", response_model=StudentDashboard)
async def student_dashboard(
    user_id: str,
    db: Session = Depends(get_db),
    insights: InsightService = Depends(get_insight_service),
) -> StudentDashboard:
    # off the event loop so the request deadline can still fire
    view = await run_in_threadpool(DashboardService(EntityStore(db)).student_view, user_id)
    return await insights.enrich(view)


@dashboard_routes.get("/teacher/{user_id}", response_model=TeacherDashboard)
def teacher_dashboard(user_id: str, db: Session = Depends(get_db)) -> TeacherDashboard:
    return DashboardService(EntityStore(db)).teacher_view(user_id)
