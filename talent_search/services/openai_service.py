from typing import Optional
import logging

import openai

from talent_search.config.settings import Settings

logger = logging.getLogger(__name__)


class OpenAIService:
    def __init__(self, settings: Settings):
        self.settings = settings
        self.client: Optional[openai.AsyncOpenAI] = None

        if not self.settings.openai_api_key:
            logger.warning("OpenAI API key is missing in settings.")
        else:
            try:
                # One request per search: no SDK-level retries
                self.client = openai.AsyncOpenAI(
                    api_key=self.settings.openai_api_key,
                    timeout=self.settings.openai_timeout_seconds,
                    max_retries=0,
                )
            except Exception as e:
                logger.error(f"Failed to initialize OpenAI client: {e}")
                self.client = None

        self.model = self.settings.openai_model
        self.temperature = self.settings.openai_temperature

    def is_configured(self) -> bool:
        """Check if the OpenAI client is initialized and likely usable."""
        return self.client is not None

    async def complete_json(self, system_prompt: str, user_prompt: str) -> Optional[str]:
        """
        Run a single chat completion constrained to a JSON object reply.

        Returns the raw reply text (possibly None). SDK errors propagate to the caller.
        """
        if not self.is_configured():
            raise RuntimeError("OpenAI client is not configured")

        logger.info(f"Sending request to OpenAI ({self.model})")
        response = await self.client.chat.completions.create(
            model=self.model,
            messages=[
                {"role": "system", "content": system_prompt},
                {"role": "user", "content": user_prompt}
            ],
            temperature=self.temperature,
            response_format={"type": "json_object"}
        )
        return response.choices[0].message.content
