"""Receipt extraction pipeline.

validate file -> build prompt -> call model -> validate response -> persist -> format

The whole chain runs inside ``cleanup_on_failure`` so an upload that does not
end up as a stored receipt is removed from disk. Errors are never swallowed:
whatever a step raises reaches the caller unchanged.
"""
import logging
from decimal import Decimal, ROUND_HALF_UP

from sqlalchemy.orm import Session

from receipt_extractor.errors import InvalidInputError
from receipt_extractor.models import Receipt
from receipt_extractor.receipt.base import CompletionProvider
from receipt_extractor.receipt.extraction import extract_with_ai
from receipt_extractor.receipt.prompt import read_image
from receipt_extractor.receipt.validation import verify_ai_response
from receipt_extractor.schemas import AIReceiptResponse
from receipt_extractor.serializers import serialize_receipt
from receipt_extractor.uploads import ALLOWED_CONTENT_TYPES, FILE_TYPE_ERROR, UploadedFile, cleanup_on_failure

logger = logging.getLogger("receipt_extractor")

CENTS = Decimal("0.01")


def validate_file_format(upload: UploadedFile | None) -> None:
    if upload is None:
        raise InvalidInputError("No file provided")
    if upload.content_type not in ALLOWED_CONTENT_TYPES:
        raise InvalidInputError(FILE_TYPE_ERROR)


def to_money(value: float) -> Decimal:
    """Quantize to the 2-decimal scale of the tax/total columns, rounding half up."""
    return Decimal(str(value)).quantize(CENTS, rounding=ROUND_HALF_UP)


def save_receipt(db: Session, upload: UploadedFile, ai_response: AIReceiptResponse) -> Receipt:
    receipt = Receipt(
        date=ai_response.date,
        currency=ai_response.currency.upper(),
        vendor_name=ai_response.vendor_name,
        receipt_items=[item.model_dump() for item in ai_response.receipt_items],
        tax=to_money(ai_response.tax),
        total=to_money(ai_response.total),
        image_url=f"/uploads/{upload.filename}",
        original_filename=upload.original_filename,
    )
    db.add(receipt)
    try:
        db.commit()
    except Exception:
        db.rollback()
        raise
    db.refresh(receipt)

    logger.info(
        "Receipt saved",
        extra={"extra_data": {
            "receipt_id": receipt.id,
            "vendor_name": receipt.vendor_name,
            "items_count": len(receipt.receipt_items),
        }},
    )
    return receipt


class ReceiptService:
    """Turns one uploaded receipt image into a stored, formatted receipt."""

    def __init__(self, provider: CompletionProvider):
        self.provider = provider

    async def extract_receipt_details(self, db: Session, upload: UploadedFile | None) -> dict:
        with cleanup_on_failure(upload):
            validate_file_format(upload)

            image_bytes = read_image(upload.path)
            data = await extract_with_ai(self.provider, image_bytes)
            ai_response = verify_ai_response(data)

            receipt = save_receipt(db, upload, ai_response)
            return serialize_receipt(receipt)
