"""OpenAI service - secondary backend for meal plan generation."""

from typing import Optional
from openai import AsyncOpenAI

from app.config import get_settings

settings = get_settings()


class OpenAIService:
    """Service for OpenAI chat completions."""

    def __init__(self):
        self._client: Optional[AsyncOpenAI] = None

    @property
    def enabled(self) -> bool:
        return bool(settings.openai_api_key)

    @property
    def client(self) -> AsyncOpenAI:
        # Created on first use so the app can boot without an OpenAI key
        if self._client is None:
            self._client = AsyncOpenAI(api_key=settings.openai_api_key, max_retries=1)
        return self._client

    async def complete_json(
        self,
        system_prompt: str,
        prompt: str,
        timeout: float,
    ) -> Optional[str]:
        """
        Run a JSON-mode chat completion with GPT-4o-mini.

        Args:
            system_prompt: System instruction
            prompt: User prompt
            timeout: Request timeout in seconds

        Returns:
            The raw message content, or None if the model returned nothing.
            API and network errors propagate to the caller.
        """
        response = await self.client.chat.completions.create(
            model=settings.openai_model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": prompt},
            ],
            response_format={"type": "json_object"},
            temperature=0.7,
            max_tokens=4000,
            timeout=timeout,
        )
        return response.choices[0].message.content


# Singleton instance
openai_service = OpenAIService()
