"""Export router — PDF and Word downloads of a message."""

from __future__ import annotations

from fastapi import APIRouter, Response

from typewise.export.document_export import (
    PDF_MEDIA_TYPE,
    WORD_MEDIA_TYPE,
    attachment_headers,
    export_pdf,
    export_word,
)
from typewise.models.request_models import ExportRequest

router = APIRouter(prefix="/api/v1/export", tags=["export"])


@router.post("/pdf")
async def download_pdf(req: ExportRequest) -> Response:
    return Response(
        content=export_pdf(req.text),
        media_type=PDF_MEDIA_TYPE,
        headers=attachment_headers("pdf"),
    )


@router.post("/word")
async def download_word(req: ExportRequest) -> Response:
    return Response(
        content=export_word(req.text),
        media_type=WORD_MEDIA_TYPE,
        headers=attachment_headers("doc"),
    )
