"""
FastAPI application for the informed consent service.

Stores signed consent records, renders them to PDF and emails the
confirmation. PDF generation and email are best-effort: a consent that was
saved is reported as saved even when its document could not be produced.

License: MIT
"""

import time
import logging
from datetime import datetime, timezone
from typing import Any, Dict

from fastapi import Body, Depends, FastAPI, HTTPException, Request
from fastapi.exceptions import RequestValidationError
from fastapi.responses import JSONResponse, Response
from pydantic import ValidationError

from consent_pdf.config import settings
from consent_pdf.legacy import normalize_legacy_fields
from consent_pdf.models import ConsentRecord
from consent_pdf.notifications import ConsentMailer
from consent_pdf.renderer import render_consent
from consent_pdf.storage import ConsentStore

# Configure logging
logging.basicConfig(
    level=logging.INFO,
    format='%(asctime)s - %(name)s - %(levelname)s - %(message)s'
)
logger = logging.getLogger(__name__)

app = FastAPI(
    title="Informed Consent API",
    version="1.0.0",
    description="Stores signed informed consents and renders them as PDF documents",
    docs_url="/docs",
    redoc_url="/redoc",
    openapi_url="/openapi.json"
)


def get_store() -> ConsentStore:
    return ConsentStore(settings.storage_dir)


def get_mailer() -> ConsentMailer:
    return ConsentMailer(settings)


def render_options() -> Dict[str, Any]:
    return {
        "page_size": settings.page_size,
        "margin_mm": settings.margin_mm,
        "practice_name": settings.practice_name,
    }


@app.middleware("http")
async def log_requests(request: Request, call_next):
    """Log all requests with timing information."""
    start_time = time.time()

    response = await call_next(request)

    duration = time.time() - start_time
    logger.info(
        f"{request.method} {request.url.path} "
        f"completed in {duration:.3f}s with status {response.status_code}"
    )

    return response


@app.get("/health")
async def health_check() -> Dict[str, str]:
    """
    Health check endpoint.

    Returns:
        Status dictionary indicating service health
    """
    return {"status": "ok"}


@app.post("/consents")
def save_consent(
    payload: Dict[str, Any] = Body(...),
    store: ConsentStore = Depends(get_store),
    mailer: ConsentMailer = Depends(get_mailer),
) -> Dict[str, Any]:
    """
    Validate, store, render and notify a signed consent.

    Args:
        payload: Consent payload (canonical or legacy field names)
        store: Record persistence
        mailer: Email collaborator

    Returns:
        JSON with the record id and whether the PDF and emails were produced

    Raises:
        HTTPException: 400 on validation errors, 500 if the record cannot be stored
    """
    data = normalize_legacy_fields(payload)
    if not data.get("submitted_at"):
        data["submitted_at"] = datetime.now(timezone.utc).isoformat()

    try:
        record = ConsentRecord.model_validate(data)
    except ValidationError as e:
        logger.error(f"Validation error: {str(e)}")
        raise HTTPException(status_code=400, detail=f"Validation error: {str(e)}")

    try:
        consent_id = store.save({**record.model_dump(mode="json"), "status": "signed"})
    except Exception as e:
        logger.error(f"Could not store consent: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Storage error: {str(e)}")

    pdf_bytes = None
    try:
        pdf_bytes = render_consent(record, **render_options())
    except Exception as e:
        logger.error(f"PDF generation failed for consent {consent_id}: {str(e)}", exc_info=True)

    notified = False
    if mailer.enabled:
        sent = [
            mailer.send_confirmation(record, consent_id, pdf_bytes),
            mailer.send_practitioner_notice(record, consent_id, pdf_bytes),
        ]
        notified = all(sent)
    else:
        logger.warning("Email not configured; skipping notifications")

    return {
        "message": "Consentimiento guardado y procesado exitosamente",
        "id": consent_id,
        "pdf_generated": pdf_bytes is not None,
        "notified": notified,
    }


@app.get("/consents/{consent_id}")
def get_consent(consent_id: str, store: ConsentStore = Depends(get_store)) -> Dict[str, Any]:
    """Return a stored consent record."""
    data = store.get(consent_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Consentimiento no encontrado.")
    return {"id": consent_id, **data}


@app.get("/consents/{consent_id}/pdf")
def get_consent_pdf(consent_id: str, store: ConsentStore = Depends(get_store)) -> Response:
    """
    Render a stored consent record to PDF.

    Raises:
        HTTPException: 404 if the record does not exist, 500 if rendering fails
    """
    data = store.get(consent_id)
    if data is None:
        raise HTTPException(status_code=404, detail="Consentimiento no encontrado.")

    try:
        start_time = time.time()
        record = ConsentRecord.model_validate(data)
        pdf_bytes = render_consent(record, **render_options())
        render_time = time.time() - start_time
    except Exception as e:
        logger.error(f"Rendering error for consent {consent_id}: {str(e)}", exc_info=True)
        raise HTTPException(status_code=500, detail=f"Rendering error: {str(e)}")

    headers = {
        "Content-Disposition": f'attachment; filename="consentimiento-{consent_id}.pdf"',
        "X-Render-Time": f"{render_time:.3f}"
    }
    return Response(content=pdf_bytes, media_type="application/pdf", headers=headers)


@app.exception_handler(RequestValidationError)
async def request_validation_handler(request: Request, exc: RequestValidationError):
    """Malformed request bodies are client errors."""
    return JSONResponse(
        status_code=400,
        content={"error": "Invalid request", "detail": str(exc)}
    )


@app.exception_handler(Exception)
async def general_exception_handler(request: Request, exc: Exception):
    """Handle unexpected errors."""
    logger.error(f"Unhandled exception: {str(exc)}", exc_info=True)
    return JSONResponse(
        status_code=500,
        content={"error": "Internal server error", "detail": str(exc)}
    )


if __name__ == "__main__":
    import uvicorn
    uvicorn.run(app, host="0.0.0.0", port=8000)
