"""
Single-shot prompt -> text inference.

The kitchen core only needs one primitive: send a prompt, get text back.
"large" is used for structured extraction, "small" for classification.
"""

from typing import Literal, Protocol

from openai import AsyncOpenAI

from kitchly.config import Settings, get_settings
from kitchly.logging_config import get_logger

logger = get_logger(__name__)

ModelSize = Literal["large", "small"]


class InferenceClient(Protocol):
    """Anything that can complete a prompt."""

    async def complete(self, prompt: str, *, size: ModelSize = "large") -> str: ...


class OpenAIInference:
    """InferenceClient backed by the OpenAI chat completions API."""

    def __init__(
        self,
        api_key: str | None = None,
        base_url: str | None = None,
        large_model: str | None = None,
        small_model: str | None = None,
        client: AsyncOpenAI | None = None,
    ):
        settings = get_settings()
        self.models: dict[str, str] = {
            "large": large_model or settings.inference_model_large,
            "small": small_model or settings.inference_model_small,
        }
        self._client = client or AsyncOpenAI(
            api_key=api_key or settings.openai_api_key,
            base_url=base_url or settings.openai_base_url,
        )

    async def complete(self, prompt: str, *, size: ModelSize = "large") -> str:
        model = self.models[size]
        logger.debug(f"Inference call: model={model}, prompt_chars={len(prompt)}")
        response = await self._client.chat.completions.create(
            model=model,
            messages=[{"role": "user", "content": prompt}],
        )
        return response.choices[0].message.content or ""

    async def close(self) -> None:
        await self._client.close()


def build_inference(settings: Settings | None = None) -> OpenAIInference | None:
    """Create the inference client, or None when no credential is configured."""
    settings = settings or get_settings()
    if not settings.inference_enabled:
        logger.warning("OPENAI_API_KEY not set - recipe generation will be unavailable")
        return None
    return OpenAIInference(
        api_key=settings.openai_api_key,
        base_url=settings.openai_base_url,
        large_model=settings.inference_model_large,
        small_model=settings.inference_model_small,
    )
