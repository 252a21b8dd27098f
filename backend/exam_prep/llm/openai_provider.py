"""OpenAI LLM Provider."""

from langchain_openai import ChatOpenAI

from exam_prep.core.config import LLMConfig
from exam_prep.core.exceptions import ConfigurationError
from exam_prep.core.logging import get_logger
from exam_prep.llm.factory import LLMFactory

logger = get_logger(__name__)


@LLMFactory.register("openai")
class OpenAIProvider:
    """OpenAI chat completions provider using langchain-openai."""

    provider_name = "OpenAI"

    def __init__(self, config: LLMConfig):
        if not config.openai_api_key:
            raise ConfigurationError("OPENAI_API_KEY is not configured. Add it to .env")

        self.config = config
        client_kwargs = {
            "model": config.model,
            "api_key": config.openai_api_key,
        }
        if config.temperature is not None:
            client_kwargs["temperature"] = config.temperature
        if config.max_tokens is not None:
            client_kwargs["max_tokens"] = config.max_tokens
        if config.base_url:
            client_kwargs["base_url"] = config.base_url
        self.client = ChatOpenAI(**client_kwargs)

    async def generate(self, messages: list[dict[str, str]], **kwargs) -> str | None:
        """Generate a single, non-streaming response."""
        response = await self.client.ainvoke(messages, **kwargs)
        content = response.content
        if isinstance(content, list):
            # Content blocks; keep the text parts only
            content = "".join(
                block if isinstance(block, str) else block.get("text", "") for block in content
            )
        logger.debug("openai_completion_received", model=self.config.model, chars=len(content or ""))
        return content
