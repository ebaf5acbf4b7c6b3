from fastapi import FastAPI, File, UploadFile, HTTPException, Body, Request, Response
from fastapi.exceptions import RequestValidationError
from fastapi.middleware.cors import CORSMiddleware
from fastapi.responses import FileResponse, JSONResponse
from starlette.exceptions import HTTPException as StarletteHTTPException
from typing import List, Optional

import base64
import logging
from datetime import datetime, timezone

from app.config import load_settings
from app.extractor import ConfigurationError, EventExtractor, UpstreamError, to_data_url
from app.ics import events_to_ics
from app.middleware import BodySizeLimitMiddleware
from app.models import CalendarEvent, ExtractRequest, ExtractResponse
from app.normalizer import ModelReplyError

# ============================================================
# CONFIG
# ============================================================
settings = load_settings()

logging.basicConfig(
    level=settings.log_level,
    format="%(asctime)s - %(name)s - %(levelname)s - %(message)s",
)
logger = logging.getLogger(__name__)

if not settings.openai_configured:
    logger.error("OPENAI_API_KEY environment variable is required")

SUPPORTED_IMAGE_TYPES = {
    "image/png",
    "image/jpeg",
    "image/jpg",
    "image/webp",
    "image/gif",
}

# built lazily so the app can start (and report health) without a key
_extractor: Optional[EventExtractor] = None


def get_extractor() -> EventExtractor:
    global _extractor
    if _extractor is None:
        _extractor = EventExtractor(settings)
    return _extractor


# ============================================================
# FASTAPI
# ============================================================
app = FastAPI(title="Event Calendar AI", version="1.0.0")

app.add_middleware(BodySizeLimitMiddleware, max_body_bytes=lambda: settings.max_body_bytes)

# added last so CORS headers are also set on 413 responses
app.add_middleware(
    CORSMiddleware,
    allow_origins=settings.cors_origins,
    allow_methods=["GET", "POST"],
    allow_headers=["Content-Type"],
)


# ============================================================
# ERROR RESPONSES
# ============================================================
@app.exception_handler(StarletteHTTPException)
async def http_error_handler(request: Request, exc: StarletteHTTPException):
    return JSONResponse(
        status_code=exc.status_code,
        content={"error": exc.detail},
        headers=getattr(exc, "headers", None),
    )


@app.exception_handler(RequestValidationError)
async def validation_error_handler(request: Request, exc: RequestValidationError):
    return JSONResponse(status_code=400, content={"error": "Invalid request body"})


@app.exception_handler(ModelReplyError)
async def model_reply_error_handler(request: Request, exc: ModelReplyError):
    logger.error(f"JSON parse error: {exc.reason or exc.message} | content: {exc.raw_text}")
    return JSONResponse(
        status_code=500,
        content={
            "error": "Could not parse AI response",
            "detail": exc.reason or exc.message,
            "rawResponse": exc.raw_text,
        },
    )


# ============================================================
# AI PROCESSING
# ============================================================
def run_extraction(image_url: str) -> ExtractResponse:
    try:
        extractor = get_extractor()
        events = extractor.extract_events(image_url)
    except (ConfigurationError, UpstreamError) as e:
        raise HTTPException(status_code=500, detail=str(e))
    except (HTTPException, ModelReplyError):
        raise
    except Exception as e:
        logger.exception(f"Server error: {e}")
        raise HTTPException(status_code=500, detail="Internal server error")

    logger.info(f"Extracted {len(events)} events")
    return ExtractResponse(events=events)


# ============================================================
# ENDPOINTS
# ============================================================
@app.post("/api/extract-events", response_model=ExtractResponse)
def extract_events(request: ExtractRequest):
    if not request.fileData:
        raise HTTPException(status_code=400, detail="No file data provided")
    return run_extraction(to_data_url(request.fileData, request.mimeType))


@app.post("/api/extract-events/upload", response_model=ExtractResponse)
def extract_events_upload(file: UploadFile = File(...)):
    mime_type = (file.content_type or "").lower()
    if mime_type not in SUPPORTED_IMAGE_TYPES:
        raise HTTPException(status_code=400, detail=f"Unsupported file type: {mime_type}")

    file_bytes = file.file.read()
    if not file_bytes:
        raise HTTPException(status_code=400, detail="No file data provided")

    img_mime = "image/jpeg" if "jp" in mime_type else mime_type
    b64 = base64.b64encode(file_bytes).decode("utf-8")
    return run_extraction(to_data_url(b64, img_mime))


@app.post("/api/calendar")
def calendar_from_events(events: List[CalendarEvent] = Body(...)):
    ics_bytes = events_to_ics(events)
    return Response(
        content=ics_bytes,
        media_type="text/calendar",
        headers={"Content-Disposition": 'attachment; filename="events.ics"'},
    )


@app.get("/api/health")
def health_check():
    return {
        "status": "ok",
        "timestamp": datetime.now(timezone.utc).isoformat(),
        "openai_configured": settings.openai_configured,
    }


@app.get("/")
def root():
    if settings.frontend_index.is_file():
        return FileResponse(settings.frontend_index)
    return {
        "message": "Event Calendar AI API",
        "version": "1.0.0",
        "endpoints": {
            "extract_events": "/api/extract-events (POST)",
            "extract_events_upload": "/api/extract-events/upload (POST)",
            "calendar": "/api/calendar (POST)",
            "health": "/api/health (GET)",
            "docs": "/docs (GET)",
        },
    }


if __name__ == "__main__":
    import uvicorn

    uvicorn.run(app, host="127.0.0.1", port=8001, reload=False)
