import os

import sentry_sdk
from dotenv import load_dotenv
from fastapi import FastAPI
from fastapi.middleware.cors import CORSMiddleware
from fastapi.staticfiles import StaticFiles
from slowapi import _rate_limit_exceeded_handler
from slowapi.errors import RateLimitExceeded

from receipt_extractor.database import engine, Base
from receipt_extractor.errors import ReceiptError, generic_exception_handler, receipt_error_handler
from receipt_extractor.logging_config import setup_logging
from receipt_extractor.middleware import RequestLoggingMiddleware
from receipt_extractor.ratelimit import limiter
from receipt_extractor.routes import receipts
from receipt_extractor.uploads import get_upload_dir

load_dotenv()

# Sentry
sentry_dsn = os.getenv("SENTRY_DSN")
if sentry_dsn:
    sentry_sdk.init(
        dsn=sentry_dsn,
        traces_sample_rate=0.1,
        send_default_pii=False,
    )

logger = setup_logging()

app = FastAPI(title="Receipt Extractor API", version="0.1.0")
app.state.limiter = limiter
app.add_exception_handler(RateLimitExceeded, _rate_limit_exceeded_handler)
app.add_exception_handler(ReceiptError, receipt_error_handler)
app.add_exception_handler(Exception, generic_exception_handler)

# CORS
origins = os.getenv("CORS_ORIGINS", "http://localhost:3000,http://localhost:5173").split(",")
app.add_middleware(
    CORSMiddleware,
    allow_origins=[o.strip() for o in origins],
    allow_credentials=True,
    allow_methods=["GET", "HEAD", "POST"],
    allow_headers=["Content-Type"],
)
app.add_middleware(RequestLoggingMiddleware)

# Create tables (no migrations; the receipts table is append-only)
Base.metadata.create_all(bind=engine)

# Stored receipt images, referenced by Receipt.image_url
upload_dir = get_upload_dir()
os.makedirs(upload_dir, exist_ok=True)
app.mount("/uploads", StaticFiles(directory=upload_dir), name="uploads")

# Routes
app.include_router(receipts.router)


@app.get("/health")
def health():
    return {"status": "ok"}
