"""Description cleaning through a generative-text provider.

Rewrites a raw tool description into a short pitch for the discovery
site. The provider is Gemini, reached through its OpenAI-compatible
endpoint so the ``openai`` SDK can be used as the client.
"""

import openai
from openai import AsyncOpenAI

from aipulse.config import Settings, get_settings
from aipulse.core.exceptions import DescriptionServiceError
from aipulse.core.logging import get_logger

logger = get_logger(__name__)

PROMPT_TEMPLATE = (
    "Clean and summarize this AI tool description into a concise, professional, "
    "and engaging 2-sentence pitch for a startup discovery website: "
    '"{description}"'
)


class DescriptionService:
    """Turns raw descriptions into two-sentence pitches.

    Usage:
        ```python
        service = DescriptionService(settings)
        cleaned = await service.clean("autogpt - experimental gpt-4 agent")
        ```
    """

    def __init__(
        self,
        settings: Settings | None = None,
        client: AsyncOpenAI | None = None,
    ) -> None:
        self._settings = settings or get_settings()
        self._client = client

    def _get_client(self) -> AsyncOpenAI:
        if self._client is None:
            api_key = self._settings.gemini_api_key.get_secret_value()
            if not api_key:
                raise DescriptionServiceError(details={"reason": "GEMINI_API_KEY not set"})
            self._client = AsyncOpenAI(
                api_key=api_key,
                base_url=self._settings.gemini_base_url,
                timeout=self._settings.gemini_timeout,
            )
        return self._client

    async def close(self) -> None:
        if self._client is not None:
            await self._client.close()
            self._client = None

    async def clean(self, description: str) -> str:
        """Return the cleaned pitch for ``description``.

        Raises:
            DescriptionServiceError: If the key is missing or the provider fails
        """
        client = self._get_client()

        try:
            response = await client.chat.completions.create(
                model=self._settings.gemini_model,
                messages=[
                    {
                        "role": "user",
                        "content": PROMPT_TEMPLATE.format(description=description),
                    }
                ],
            )
        except openai.APIError as e:
            logger.error("description_clean_failed", error_type=type(e).__name__, error=str(e))
            raise DescriptionServiceError(details={"provider": "gemini"}) from e

        content = response.choices[0].message.content if response.choices else None
        if not content:
            logger.error("description_clean_empty", model=self._settings.gemini_model)
            raise DescriptionServiceError(details={"provider": "gemini"})

        logger.info(
            "description_cleaned",
            input_length=len(description),
            output_length=len(content),
        )
        return content.strip()
