import logging
import os

from receipt_extractor.errors import ServerError
from receipt_extractor.receipt.base import CompletionProvider
from receipt_extractor.receipt.openai_provider import OpenAICompletionProvider

logger = logging.getLogger("receipt_extractor")


def get_completion_provider() -> CompletionProvider:
    """Return the configured receipt extraction provider."""
    provider = os.getenv("RECEIPT_PROVIDER", "openai")
    if provider == "openai":
        api_key = os.getenv("OPENAI_API_KEY")
        if not api_key:
            logger.error("Receipt extraction config error: OPENAI_API_KEY is not set")
            raise ServerError("Receipt scanning is not available")
        return OpenAICompletionProvider(api_key)
    logger.error(f"Receipt extraction config error: unknown provider {provider}")
    raise ServerError("Receipt scanning is not available")
