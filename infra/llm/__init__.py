from infra.llm.base import LLM

__all__ = ["LLM"]
