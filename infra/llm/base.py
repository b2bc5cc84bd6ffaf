from abc import ABC, abstractmethod


class LLM(ABC):
    """
    Defines the contract for all LLMs.
    """
    @abstractmethod
    async def agenerate(self, prompt: str, *, timeout: float) -> str:
        raise NotImplementedError
