from receipt_extractor.models import Receipt


def serialize_receipt(receipt: Receipt) -> dict:
    return {
        "id": str(receipt.id),
        "date": receipt.date,
        "currency": receipt.currency,
        "vendor_name": receipt.vendor_name,
        "receipt_items": [
            {"item_name": item["item_name"], "item_cost": item["item_cost"]}
            for item in receipt.receipt_items
        ],
        "tax": float(receipt.tax),
        "total": float(receipt.total),
        "image_url": receipt.image_url,
    }
