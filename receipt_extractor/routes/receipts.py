import logging

from fastapi import APIRouter, Depends, Request, UploadFile, File
from sqlalchemy.orm import Session

from receipt_extractor.database import get_db
from receipt_extractor.ratelimit import RECEIPT_RATE_LIMIT, limiter
from receipt_extractor.receipt.base import CompletionProvider
from receipt_extractor.receipt.factory import get_completion_provider
from receipt_extractor.receipt.service import ReceiptService
from receipt_extractor.schemas import ErrorResponse, ReceiptResponse
from receipt_extractor.uploads import store_upload

logger = logging.getLogger("receipt_extractor")
router = APIRouter()


@router.post(
    "/receipt/extract-receipt-details",
    response_model=ReceiptResponse,
    responses={400: {"model": ErrorResponse}, 500: {"model": ErrorResponse}},
)
@limiter.limit(RECEIPT_RATE_LIMIT)
async def extract_receipt_details(
    request: Request,
    file: UploadFile | None = File(None),
    db: Session = Depends(get_db),
    provider: CompletionProvider = Depends(get_completion_provider),
):
    upload = await store_upload(file)
    return await ReceiptService(provider).extract_receipt_details(db, upload)
