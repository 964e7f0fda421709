"""Document export API routes.

Endpoints:
  POST   /generate-rams-pdf    Render the form as a PDF data URI
  POST   /generate-rams-word   Render the form as a DOCX data URI
"""

import logging

from fastapi import APIRouter, HTTPException

from rams.schemas.rams import FormSnapshot
from rams.services.documents import (
    DOCX_MIME,
    PDF_MIME,
    DocumentGenerationError,
    build_filename,
    render_docx,
    render_pdf,
    to_data_uri,
)
from rams.services.gating import LEGAL_DISCLAIMER

logger = logging.getLogger(__name__)

router = APIRouter(tags=["documents"])


@router.post("/generate-rams-pdf")
def generate_rams_pdf(body: FormSnapshot):
    """Render the RAMS as a PDF."""
    try:
        data = render_pdf(body)
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "docData": to_data_uri(data, PDF_MIME),
        "filename": build_filename(body.project_name, "pdf"),
        "message": "PDF generated successfully",
        "disclaimer": LEGAL_DISCLAIMER,
    }


@router.post("/generate-rams-word")
def generate_rams_word(body: FormSnapshot):
    """Render the RAMS as a Word document."""
    try:
        data = render_docx(body)
    except DocumentGenerationError as e:
        raise HTTPException(status_code=500, detail=str(e))

    return {
        "success": True,
        "docData": to_data_uri(data, DOCX_MIME),
        "filename": build_filename(body.project_name, "docx"),
        "message": "Word document generated successfully",
        "disclaimer": LEGAL_DISCLAIMER,
    }
