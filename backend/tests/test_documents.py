import base64
from datetime import datetime, timezone
from io import BytesIO

import pytest
from docx import Document

from rams.schemas.rams import FormSnapshot
from rams.services import documents
from rams.services.documents import (
    DocumentGenerationError,
    build_filename,
    render_docx,
    render_pdf,
    to_data_uri,
)

NOW = datetime(2024, 3, 1, 12, 0, tzinfo=timezone.utc)


def test_render_pdf(complete_snapshot):
    data = render_pdf(complete_snapshot, now=NOW)
    assert data.startswith(b"%PDF")


def test_render_pdf_empty_snapshot():
    assert render_pdf(FormSnapshot()).startswith(b"%PDF")


def test_render_pdf_non_latin_text():
    snapshot = FormSnapshot(
        project_name="Café refit – phase 2",
        controls="“Quoted” controls • bullet ≥ 2m 工程",
        selected_hazards=["Working at Height"],
    )
    assert render_pdf(snapshot).startswith(b"%PDF")


def test_render_docx(complete_snapshot):
    data = render_docx(complete_snapshot, now=NOW)
    assert data.startswith(b"PK")

    doc = Document(BytesIO(data))
    text = "\n".join(p.text for p in doc.paragraphs)
    assert "RISK ASSESSMENT & METHOD STATEMENT" in text
    assert complete_snapshot.project_name in text
    assert "Generated: 01/03/2024" in text


def test_render_docx_lists_tags():
    snapshot = FormSnapshot.model_validate({
        "selectedHazards": ["Working at Height"],
        "selectedPPE": ["Hard Hat", "Fall Arrest Harness"],
    })
    doc = Document(BytesIO(render_docx(snapshot)))
    text = [p.text for p in doc.paragraphs]
    assert "Working at Height" in text
    assert "Fall Arrest Harness" in text


def test_render_docx_strips_xml_control_characters():
    snapshot = FormSnapshot(project_name="Block\x0bC", controls="Barriers\x00 up\x1f")
    data = render_docx(snapshot)
    assert data.startswith(b"PK")

    text = [p.text for p in Document(BytesIO(data)).paragraphs]
    assert "Project Name: BlockC" in text
    assert "Control Measures: Barriers up" in text


def test_render_docx_control_characters_only():
    doc = Document(BytesIO(render_docx(FormSnapshot(project_name="\x0b\x0c"))))
    assert "Project Name: Not specified" in [p.text for p in doc.paragraphs]


def test_pdf_library_failure(monkeypatch):
    def broken_output(self, *args, **kwargs):
        raise RuntimeError("disk full")

    monkeypatch.setattr(documents._RAMSPDF, "output", broken_output)
    with pytest.raises(DocumentGenerationError):
        render_pdf(FormSnapshot())


def test_docx_library_failure(monkeypatch):
    def broken_document():
        raise ValueError("bad template")

    monkeypatch.setattr(documents, "Document", broken_document)
    with pytest.raises(DocumentGenerationError):
        render_docx(FormSnapshot())


def test_build_filename():
    stamp = int(NOW.timestamp() * 1000)
    assert build_filename("Block C  windows", "pdf", NOW) == f"RAMS_Block_C_windows_{stamp}.pdf"
    assert build_filename(None, "docx", NOW) == f"RAMS_document_{stamp}.docx"
    assert build_filename("   ", "docx", NOW) == f"RAMS_document_{stamp}.docx"


def test_to_data_uri():
    uri = to_data_uri(b"%PDF-1.4", "application/pdf")
    prefix = "data:application/pdf;base64,"
    assert uri.startswith(prefix)
    assert base64.b64decode(uri[len(prefix):]) == b"%PDF-1.4"
