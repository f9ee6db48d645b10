from pydantic import BaseModel


class ReceiptItem(BaseModel):
    item_name: str
    item_cost: float


class AIReceiptResponse(BaseModel):
    """Model output after it has passed every response check."""

    date: str | None  # YYYY-MM-DD as reported by the model, not re-parsed
    currency: str
    vendor_name: str | None
    receipt_items: list[ReceiptItem]
    tax: float
    total: float


class ReceiptResponse(BaseModel):
    id: str
    date: str
    currency: str
    vendor_name: str
    receipt_items: list[ReceiptItem]
    tax: float
    total: float
    image_url: str


class ErrorResponse(BaseModel):
    kind: str
    message: str
