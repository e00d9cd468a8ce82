"""LLM service for meal plan generation with OpenRouter (primary) and GPT fallback."""

import json
import asyncio
import time
from typing import Optional
import httpx
import openai

from app.config import get_settings
from app.errors import BackendUnavailable, MalformedResponse
from app.services.openai_client import openai_service
from app.services.prompts import SYSTEM_PROMPT

settings = get_settings()


class LLMService:
    """
    Service for LLM-based JSON generation.

    Primary: OpenRouter chat completions over plain HTTP
    Fallback: GPT-4o-mini via the OpenAI SDK
    """

    OPENROUTER_CONFIG = {
        "name": "OpenRouter",
        "base_url": "https://openrouter.ai/api/v1",
        "timeout": 15,
        "max_retries": 1,
    }

    GPT_CONFIG = {
        "name": "GPT-4o-mini",
        "timeout": 15,
    }

    def __init__(self):
        self.openrouter_api_key = settings.openrouter_api_key

    async def generate_json(self, prompt: str) -> dict:
        """
        Generate a JSON object from a prompt.

        Tries OpenRouter first, then GPT. Raises MalformedResponse if a
        backend answered but nothing parseable came back, BackendUnavailable
        if no backend answered at all.
        """
        got_content = False

        if self.openrouter_api_key:
            print(f"🚀 Trying {self.OPENROUTER_CONFIG['name']} ({settings.openrouter_model})...")
            try:
                raw_content = await self._try_openrouter(prompt)
                if raw_content:
                    got_content = True
                    parsed = self._parse_json_response(raw_content)
                    if parsed is not None:
                        return parsed
                    print(f"⚠️ {self.OPENROUTER_CONFIG['name']} returned unparseable content")
            except BackendUnavailable as e:
                print(f"⚠️ {self.OPENROUTER_CONFIG['name']} failed: {e}")

        if openai_service.enabled:
            print(f"🔄 Falling back to {self.GPT_CONFIG['name']}...")
            try:
                raw_content = await openai_service.complete_json(
                    SYSTEM_PROMPT, prompt, timeout=self.GPT_CONFIG["timeout"]
                )
            except openai.OpenAIError as e:
                print(f"❌ {self.GPT_CONFIG['name']} also failed: {e}")
                raw_content = None
            if raw_content:
                got_content = True
                parsed = self._parse_json_response(raw_content)
                if parsed is not None:
                    return parsed

        if got_content:
            raise MalformedResponse("LLM response was not valid JSON")
        raise BackendUnavailable("All generation backends failed or none is configured")

    async def _try_openrouter(self, prompt: str) -> Optional[str]:
        """Call OpenRouter with retries. Returns raw message content."""
        config = self.OPENROUTER_CONFIG
        last_error = None

        for attempt in range(config["max_retries"] + 1):
            if attempt > 0:
                wait_time = 2 ** (attempt - 1)
                print(f"   Retry {attempt}/{config['max_retries']} after {wait_time}s...")
                await asyncio.sleep(wait_time)

            try:
                return await self._call_openrouter(prompt)
            except (httpx.HTTPError, KeyError, IndexError, ValueError) as e:
                last_error = str(e)
                print(f"   Attempt {attempt + 1} error: {last_error[:100]}")

        raise BackendUnavailable(last_error or "OpenRouter request failed")

    async def _call_openrouter(self, prompt: str) -> Optional[str]:
        """Make a single OpenRouter chat completion call."""
        start_time = time.time()

        headers = {
            "Authorization": f"Bearer {self.openrouter_api_key}",
            "Content-Type": "application/json",
            "HTTP-Referer": "https://meal-planner.app",
            "X-Title": "Meal Planner",
        }

        payload = {
            "model": settings.openrouter_model,
            "messages": [
                {"role": "system", "content": SYSTEM_PROMPT},
                {"role": "user", "content": prompt},
            ],
            "temperature": 0.7,
            "max_tokens": 4000,
        }

        url = f"{self.OPENROUTER_CONFIG['base_url']}/chat/completions"

        async with httpx.AsyncClient(timeout=self.OPENROUTER_CONFIG["timeout"]) as client:
            response = await client.post(url, headers=headers, json=payload)
            response.raise_for_status()

            data = response.json()
            raw_content = data["choices"][0]["message"]["content"]

        print(f"   Latency: {time.time() - start_time:.1f}s | {len(raw_content or '')} chars")
        return raw_content

    def _parse_json_response(self, raw_content: str) -> Optional[dict]:
        """Parse JSON from LLM response, handling markdown code blocks."""

        # Try direct parse first
        try:
            parsed = json.loads(raw_content)
            return parsed if isinstance(parsed, dict) else None
        except json.JSONDecodeError:
            pass

        # Try extracting from markdown code block
        json_str = raw_content

        if "```json" in json_str:
            try:
                json_str = json_str.split("```json")[1].split("```")[0]
                return json.loads(json_str.strip())
            except (IndexError, json.JSONDecodeError):
                pass

        if "```" in json_str:
            try:
                json_str = json_str.split("```")[1].split("```")[0]
                return json.loads(json_str.strip())
            except (IndexError, json.JSONDecodeError):
                pass

        # Try finding JSON object in content
        try:
            start = raw_content.find("{")
            end = raw_content.rfind("}") + 1
            if start >= 0 and end > start:
                return json.loads(raw_content[start:end])
        except json.JSONDecodeError:
            pass

        return None


# Singleton instance
llm_service = LLMService()
