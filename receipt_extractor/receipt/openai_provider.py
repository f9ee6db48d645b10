import logging
import os
from typing import Any

import openai
from openai import AsyncOpenAI

from receipt_extractor.receipt.base import ProviderError

logger = logging.getLogger("receipt_extractor")

MODEL = "gpt-4o"
MAX_TOKENS = 1000


class OpenAICompletionProvider:
    """Receipt extraction through OpenAI chat completions with GPT-4o vision."""

    def __init__(self, api_key: str | None = None):
        self.client = AsyncOpenAI(api_key=api_key or os.getenv("OPENAI_API_KEY"))

    async def complete(self, messages: list[dict[str, Any]]) -> str | None:
        try:
            response = await self.client.chat.completions.create(
                model=MODEL,
                response_format={"type": "json_object"},
                messages=messages,
                max_tokens=MAX_TOKENS,
            )
        except openai.APIStatusError as e:
            raise ProviderError(str(e), status_code=e.status_code) from e
        except openai.OpenAIError as e:
            raise ProviderError(str(e)) from e

        if not response.choices:
            return None
        return response.choices[0].message.content
