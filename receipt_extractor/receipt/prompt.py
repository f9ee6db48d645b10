import base64
from typing import Any

INSTRUCTIONS = """\
Please extract the following fields from the provided receipt image and output only a single JSON object (no extra text or formatting):

{
  "date": "YYYY-MM-DD",
  "currency": "3-letter currency code (e.g. USD, EUR, GBP)",
  "vendor_name": "String",
  "receipt_items": [
    {
      "item_name": "String",
      "item_cost": Number
    }
  ],
  "tax": Number,
  "total": Number
}"""

# Uploads may be PNG too; the data URL is always tagged as JPEG.
IMAGE_MEDIA_TYPE = "image/jpeg"


def encode_image(data: bytes) -> str:
    return base64.b64encode(data).decode("utf-8")


def read_image(path: str) -> bytes:
    with open(path, "rb") as f:
        return f.read()


def build_extraction_messages(image_bytes: bytes) -> list[dict[str, Any]]:
    """Chat messages asking the model for the receipt fields as one JSON object."""
    b64_image = encode_image(image_bytes)
    return [
        {
            "role": "user",
            "content": [
                {"type": "text", "text": INSTRUCTIONS},
                {
                    "type": "image_url",
                    "image_url": {"url": f"data:{IMAGE_MEDIA_TYPE};base64,{b64_image}"},
                },
            ],
        }
    ]
