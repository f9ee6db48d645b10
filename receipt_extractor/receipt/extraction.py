import json
import logging
from typing import Any

from receipt_extractor.errors import ServerError
from receipt_extractor.receipt.base import CompletionProvider, ProviderError
from receipt_extractor.receipt.prompt import build_extraction_messages

logger = logging.getLogger("receipt_extractor")


def _reject_constant(name: str):
    # NaN and Infinity are not JSON; json.loads accepts them by default
    raise ValueError(f"Non-standard JSON constant: {name}")


async def extract_with_ai(provider: CompletionProvider, image_bytes: bytes) -> Any:
    """Run one completion over the receipt image and return the parsed JSON payload.

    The payload is untyped; shape checks happen in ``verify_ai_response``.
    Every failure surfaces as ``ServerError`` with a message that tells apart a
    remote 5xx, any other provider failure, empty content, and malformed JSON.
    """
    messages = build_extraction_messages(image_bytes)

    try:
        content = await provider.complete(messages)
    except ProviderError as e:
        if e.status_code is not None and e.status_code >= 500:
            logger.error(f"AI service error: status {e.status_code}: {e.message}")
            raise ServerError(f"AI service returned {e.status_code} status") from e
        logger.error(f"AI extraction failed: {e.message}")
        raise ServerError(f"AI extraction failed: {e.message}") from e
    except Exception as e:
        logger.error(f"AI extraction failed: {e}", exc_info=True)
        raise ServerError(f"AI extraction failed: {e}") from e

    logger.debug("AI response", extra={"extra_data": {"content": content}})
    if not content:
        raise ServerError("AI model returned empty response")

    try:
        return json.loads(content, parse_constant=_reject_constant)
    except ValueError as e:
        logger.error(f"AI model returned invalid JSON: {e}")
        raise ServerError("AI model returned invalid JSON response") from e
