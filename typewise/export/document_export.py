"""Document export — PDF and "Word" downloads of a generated message."""

from __future__ import annotations

import io
import logging

from reportlab.lib.pagesizes import A4
from reportlab.lib.units import mm
from reportlab.lib.utils import simpleSplit
from reportlab.pdfgen import canvas

logger = logging.getLogger(__name__)

EXPORT_BASENAME = "TypeWise-Message"
PDF_MEDIA_TYPE = "application/pdf"
WORD_MEDIA_TYPE = "application/msword"

FONT_NAME = "Helvetica"
FONT_SIZE = 11
LINE_HEIGHT = FONT_SIZE * 1.4
MARGIN = 10 * mm
TEXT_WIDTH = 180 * mm


def wrap_text(text: str, width: float = TEXT_WIDTH) -> list[str]:
    """Split text into lines no wider than ``width`` points, keeping blank lines."""
    lines: list[str] = []
    for paragraph in text.replace("\r\n", "\n").split("\n"):
        if not paragraph.strip():
            lines.append("")
            continue
        lines.extend(simpleSplit(paragraph, FONT_NAME, FONT_SIZE, width))
    return lines


def paginate(lines: list[str]) -> list[list[str]]:
    """Group wrapped lines into pages that fit between the top and bottom margins."""
    _, page_height = A4
    per_page = max(1, int((page_height - 2 * MARGIN - FONT_SIZE) // LINE_HEIGHT) + 1)
    return [lines[i:i + per_page] for i in range(0, len(lines), per_page)] or [[]]


def export_pdf(text: str) -> bytes:
    """Render the message onto A4 pages and return the PDF bytes."""
    buffer = io.BytesIO()
    _, page_height = A4
    pdf = canvas.Canvas(buffer, pagesize=A4)
    pdf.setTitle(EXPORT_BASENAME)

    for page in paginate(wrap_text(text)):
        pdf.setFont(FONT_NAME, FONT_SIZE)
        y = page_height - MARGIN - FONT_SIZE
        for line in page:
            pdf.drawString(MARGIN, y, line)
            y -= LINE_HEIGHT
        pdf.showPage()

    pdf.save()
    data = buffer.getvalue()
    logger.info("PDF export rendered: %d bytes", len(data))
    return data


def export_word(text: str) -> bytes:
    """Return the message as a plain-text document for word processors."""
    return text.encode("utf-8")


def attachment_headers(extension: str) -> dict[str, str]:
    return {"Content-Disposition": f'attachment; filename="{EXPORT_BASENAME}.{extension}"'}
