import uuid
from datetime import datetime, timezone

from sqlalchemy import Column, String, Numeric, DateTime, JSON

from receipt_extractor.database import Base


def new_uuid():
    return str(uuid.uuid4())


def utcnow():
    return datetime.now(timezone.utc)


class Receipt(Base):
    __tablename__ = "receipts"

    id = Column(String, primary_key=True, default=new_uuid)
    date = Column(String, nullable=False)
    currency = Column(String(3), nullable=False)
    vendor_name = Column(String, nullable=False)
    receipt_items = Column(JSON, nullable=False)  # [{"item_name": str, "item_cost": float}]
    tax = Column(Numeric(10, 2), nullable=False)
    total = Column(Numeric(10, 2), nullable=False)
    image_url = Column(String, nullable=False)
    original_filename = Column(String, nullable=False)
    created_at = Column(DateTime(timezone=True), default=utcnow, nullable=False)
