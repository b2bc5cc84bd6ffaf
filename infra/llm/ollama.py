import asyncio
import time

from langchain_ollama import OllamaLLM as LangChainOllamaLLM

from infra.llm.base import LLM
from nexus.utils.logger import configure_logging

logger = configure_logging()

DEFAULT_TIMEOUT = 30.0


class OllamaLLM(LLM):
    def __init__(self, model: str, temperature: float = 0.7, base_url: str = "http://localhost:11434"):
        # The LangChain class is aliased so this wrapper can keep the OllamaLLM name.
        self.model = model
        self._llm = LangChainOllamaLLM(model=model, temperature=temperature, base_url=base_url)

    async def agenerate(self, prompt: str, *, timeout: float = DEFAULT_TIMEOUT) -> str:
        start_time = time.time()
        logger.debug("LLM call starting model=%s ~%s input tokens", self.model, len(prompt) // 4)
        try:
            result = await asyncio.wait_for(self._llm.ainvoke(prompt), timeout=timeout)
        except asyncio.TimeoutError:
            elapsed = time.time() - start_time
            logger.error("LLM call timed out after %.2fs (timeout: %ss) model=%s", elapsed, timeout, self.model)
            raise TimeoutError(f"LLM call timed out after {timeout}s") from None
        except Exception as e:
            elapsed = time.time() - start_time
            logger.error("LLM call failed after %.2fs: %s", elapsed, e)
            raise

        logger.info("LLM call completed in %.2fs model=%s", time.time() - start_time, self.model)
        text = getattr(result, "content", result)
        return text if isinstance(text, str) else str(text)
