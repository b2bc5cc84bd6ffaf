"""
Student dashboard insight: a templated message, optionally rewritten by an LLM.

Enrichment fails open. Whatever goes wrong on the LLM side (timeout, model
down, empty answer) the templated message is kept.
"""

from __future__ import annotations

from typing import Optional

from infra.llm.base import LLM
from nexus.config import settings
from nexus.schemas.dashboard_schemas import Insight, StudentDashboard
from nexus.utils.logger import configure_logging

logger = configure_logging()

INSIGHT_TITLE = "Keep it up!"
FIRST_ASSIGNMENT_MESSAGE = "Start your first assignment to build momentum!"
POSITIVE_THRESHOLD = 70
MAX_INSIGHT_CHARS = 280


def templated_insight(completed_count: int, avg_score: int) -> Insight:
    if completed_count <= 0:
        return Insight(title=INSIGHT_TITLE, message=FIRST_ASSIGNMENT_MESSAGE)
    plural = "s" if completed_count > 1 else ""
    tail = "Great work!" if avg_score > POSITIVE_THRESHOLD else "Keep pushing!"
    return Insight(
        title=INSIGHT_TITLE,
        message=f"You've completed {completed_count} assignment{plural}. {tail}",
    )


def build_insight_prompt(view: StudentDashboard) -> str:
    upcoming = ", ".join(t.title for t in view.today[:3]) or "none"
    return (
        "You are an encouraging study coach. Write one or two short sentences "
        "(under 40 words) of motivation for a student.\n"
        f"Completed assignments: {view.stats.completed_count}\n"
        f"Average score: {view.avg_score}%\n"
        f"Upcoming tasks: {upcoming}\n"
        f"Current streak (days): {view.stats.streak}\n"
        "Reply with the message only."
    )


def default_llm() -> Optional[LLM]:
    if not settings.insight_llm_enabled:
        return None
    from infra.llm.ollama import OllamaLLM

    return OllamaLLM(model=settings.ollama_model, base_url=settings.ollama_base_url)


class InsightService:
    def __init__(self, llm: Optional[LLM] = None, timeout: Optional[float] = None):
        self.llm = llm
        self.timeout = timeout if timeout is not None else settings.insight_llm_timeout_seconds

    async def enrich(self, view: StudentDashboard) -> StudentDashboard:
        if self.llm is None:
            return view
        try:
            text = await self.llm.agenerate(build_insight_prompt(view), timeout=self.timeout)
        except Exception as e:
            logger.warning("insight enrichment failed, keeping template error=%s", e)
            return view

        text = (text or "").strip().strip('"').strip()
        if not text:
            logger.warning("insight enrichment returned empty text, keeping template")
            return view
        view.insight = Insight(title=view.insight.title, message=text[:MAX_INSIGHT_CHARS])
        return view
