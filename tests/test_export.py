"""PDF / Word export."""

from __future__ import annotations

from reportlab.pdfbase.pdfmetrics import stringWidth

from typewise.export.document_export import (
    FONT_NAME,
    FONT_SIZE,
    TEXT_WIDTH,
    export_pdf,
    export_word,
    paginate,
    wrap_text,
)

LONG_PARAGRAPH = (
    "I am writing to express my interest in the summer internship program. "
    "As a computer science student I have built several Python services, "
    "and I would welcome the chance to contribute to your platform team. "
) * 4


def test_wrap_text_respects_page_width():
    lines = wrap_text(LONG_PARAGRAPH)

    assert len(lines) > 1
    assert all(stringWidth(line, FONT_NAME, FONT_SIZE) <= TEXT_WIDTH for line in lines)
    assert " ".join(lines).split() == LONG_PARAGRAPH.split()


def test_wrap_text_keeps_blank_lines():
    lines = wrap_text("Subject: Hello\n\nDear team,\r\nThanks.")

    assert lines == ["Subject: Hello", "", "Dear team,", "Thanks."]


def test_export_pdf_produces_pdf_bytes():
    data = export_pdf("Subject: Hello\n\n" + LONG_PARAGRAPH)

    assert data.startswith(b"%PDF")
    assert len(data) > 500


def test_paginate_splits_long_text_across_pages():
    lines = [f"Line {i}" for i in range(200)]
    pages = paginate(lines)

    assert len(pages) > 1
    assert [line for page in pages for line in page] == lines
    assert paginate(["One line"]) == [["One line"]]
    assert paginate([]) == [[]]


def test_export_word_is_plain_text():
    assert export_word("Hi ✓\nBye") == "Hi ✓\nBye".encode("utf-8")


def test_export_routes(client):
    pdf = client.post("/api/v1/export/pdf", json={"text": "Hello"})
    word = client.post("/api/v1/export/word", json={"text": "Hello"})

    assert pdf.status_code == 200
    assert pdf.headers["content-type"] == "application/pdf"
    assert 'filename="TypeWise-Message.pdf"' in pdf.headers["content-disposition"]
    assert pdf.content.startswith(b"%PDF")

    assert word.status_code == 200
    assert word.headers["content-type"].startswith("application/msword")
    assert 'filename="TypeWise-Message.doc"' in word.headers["content-disposition"]
    assert word.content == b"Hello"


def test_export_rejects_empty_text(client):
    assert client.post("/api/v1/export/pdf", json={"text": ""}).status_code == 422
