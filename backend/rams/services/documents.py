"""RAMS document rendering.

Renders a snapshot as PDF (fpdf2) or Word (python-docx) and wraps the
bytes for transport as a base64 data URI.

Generation is all-or-nothing: any library failure surfaces as
DocumentGenerationError and no partial document is returned.
"""

import base64
import logging
import re
from datetime import datetime, timezone
from io import BytesIO

from docx import Document
from docx.shared import Pt, RGBColor
from fpdf import FPDF

from rams.schemas.rams import FormSnapshot
from rams.services.gating import LEGAL_DISCLAIMER

logger = logging.getLogger(__name__)

PDF_MIME = "application/pdf"
DOCX_MIME = "application/vnd.openxmlformats-officedocument.wordprocessingml.document"

NOT_SPECIFIED = "Not specified"
REVIEW_NOTICE = "This RAMS document must be reviewed by a competent person before use."

# ---------------------------------------------------------------
# Colour palette
# ---------------------------------------------------------------
NAVY = (27, 42, 74)
WHITE = (255, 255, 255)
DARK_TEXT = (30, 30, 30)
MUTED = (100, 100, 100)

# (heading, [(label, attribute)], tag attribute listed as bullets)
SECTIONS: tuple[tuple[str, tuple[tuple[str, str], ...], str | None], ...] = (
    (
        "PROJECT INFORMATION",
        (
            ("Project Name", "project_name"),
            ("Client", "client_name"),
            ("Site Address", "site_address"),
            ("Job Reference", "job_reference"),
            ("Start Date", "start_date"),
            ("End Date", "end_date"),
            ("Duration", "duration"),
            ("Site Contact", "site_contact_person"),
        ),
        None,
    ),
    (
        "WORK DETAILS",
        (
            ("Trade", "trade"),
            ("Task Type", "task_type"),
            ("Scope of Work", "scope_of_work"),
            ("Method Statement", "method_statement"),
            ("Sequence of Operations", "sequence_of_operations"),
            ("Persons at Risk", "persons_at_risk"),
        ),
        None,
    ),
    (
        "IDENTIFIED HAZARDS AND CONTROLS",
        (
            ("Additional Hazards", "custom_hazards"),
            ("Control Measures", "controls"),
        ),
        "selected_hazards",
    ),
    (
        "PPE AND EQUIPMENT",
        (
            ("Special Equipment", "special_equipment"),
            ("Tooling Safety", "tooling_safety"),
            ("Signage and Barriers", "signage_and_barriers"),
        ),
        "selected_ppe",
    ),
    (
        "EMERGENCY ARRANGEMENTS",
        (
            ("First Aid", "first_aid_arrangements"),
            ("Fire Precautions", "fire_precautions"),
            ("Emergency Contacts", "emergency_contacts"),
            ("Site Manager", "site_manager"),
            ("Contact Number", "contact_number"),
        ),
        None,
    ),
    (
        "AUTHORISATION",
        (
            ("Prepared By", "prepared_by"),
            ("Reviewed By", "reviewed_by"),
            ("Review Date", "review_date"),
            ("Revision", "revision_number"),
        ),
        None,
    ),
)

# Characters outside latin-1 that the core PDF fonts cannot encode
_PDF_REPLACEMENTS = {
    "‘": "'",
    "’": "'",
    "“": '"',
    "”": '"',
    "–": "-",
    "—": "-",
    "•": "-",
    "…": "...",
    "≤": "<=",
    "≥": ">=",
}

# Control characters XML 1.0 forbids; python-docx rejects them in runs
_XML_ILLEGAL = re.compile(r"[\x00-\x08\x0b\x0c\x0e-\x1f\ufffe\uffff]")


class DocumentGenerationError(RuntimeError):
    """The document library failed to produce a file."""


class _RAMSPDF(FPDF):
    """FPDF subclass with RAMS header/footer branding."""

    def __init__(self, project_name: str) -> None:
        super().__init__(orientation="P", unit="mm", format="A4")
        self._project_name = project_name

    # -- Page header ------------------------------------------
    def header(self) -> None:
        self.set_fill_color(*NAVY)
        self.rect(0, 0, 210, 18, "F")
        self.set_font("Helvetica", "B", 11)
        self.set_text_color(*WHITE)
        self.set_xy(10, 4)
        self.cell(0, 10, "RISK ASSESSMENT & METHOD STATEMENT", align="L")
        self.set_font("Helvetica", "", 9)
        self.set_xy(-80, 4)
        self.cell(70, 10, _pdf_text(self._project_name), align="R")
        self.ln(16)

    # -- Page footer ------------------------------------------
    def footer(self) -> None:
        self.set_y(-15)
        self.set_font("Helvetica", "I", 7)
        self.set_text_color(140, 140, 140)
        self.cell(
            0, 10,
            f"Page {self.page_no()}/{{nb}}  |  {REVIEW_NOTICE}",
            align="C",
        )


def render_pdf(snapshot: FormSnapshot, now: datetime | None = None) -> bytes:
    """Render the snapshot as a PDF.

    Raises:
        DocumentGenerationError: fpdf2 failed to build the document.
    """
    generated = (now or datetime.now(timezone.utc)).strftime("%d/%m/%Y")
    try:
        pdf = _RAMSPDF(snapshot.text("project_name") or NOT_SPECIFIED)
        pdf.alias_nb_pages()
        pdf.set_auto_page_break(auto=True, margin=20)
        pdf.add_page()

        pdf.set_font("Helvetica", "", 9)
        pdf.set_text_color(*MUTED)
        pdf.cell(0, 6, f"Generated: {generated}", align="L", new_x="LMARGIN", new_y="NEXT")
        pdf.ln(4)

        for heading, fields, tag_attr in SECTIONS:
            _pdf_section_heading(pdf, heading)
            if tag_attr:
                _pdf_bullets(pdf, [tag.value for tag in getattr(snapshot, tag_attr)])
            for label, attr in fields:
                _pdf_field(pdf, label, snapshot.text(attr) or NOT_SPECIFIED)
            pdf.ln(4)

        _pdf_section_heading(pdf, "LEGAL NOTICE")
        pdf.set_font("Helvetica", "I", 8)
        pdf.set_text_color(*MUTED)
        pdf.multi_cell(0, 4, _pdf_text(LEGAL_DISCLAIMER), new_x="LMARGIN", new_y="NEXT")

        data = bytes(pdf.output())
    except Exception as exc:
        logger.exception("PDF generation failed")
        raise DocumentGenerationError("Failed to generate PDF document") from exc

    logger.info("Generated PDF (%d bytes)", len(data))
    return data


def render_docx(snapshot: FormSnapshot, now: datetime | None = None) -> bytes:
    """Render the snapshot as a Word document.

    Raises:
        DocumentGenerationError: python-docx failed to build the document.
    """
    generated = (now or datetime.now(timezone.utc)).strftime("%d/%m/%Y")
    try:
        doc = Document()
        doc.add_heading("RISK ASSESSMENT & METHOD STATEMENT", level=0)
        doc.add_paragraph(f"Generated: {generated}")

        for heading, fields, tag_attr in SECTIONS:
            doc.add_heading(heading, level=1)
            if tag_attr:
                tags = getattr(snapshot, tag_attr)
                if tags:
                    for tag in tags:
                        doc.add_paragraph(_docx_text(tag.value), style="List Bullet")
                else:
                    doc.add_paragraph("None selected")
            for label, attr in fields:
                p = doc.add_paragraph()
                run = p.add_run(f"{label}: ")
                run.bold = True
                p.add_run(_docx_text(snapshot.text(attr)) or NOT_SPECIFIED)

        doc.add_heading("LEGAL NOTICE", level=1)
        notice = doc.add_paragraph().add_run(LEGAL_DISCLAIMER)
        notice.italic = True
        notice.font.size = Pt(8)
        notice.font.color.rgb = RGBColor(*MUTED)

        footer = doc.add_paragraph().add_run(REVIEW_NOTICE)
        footer.bold = True

        buf = BytesIO()
        doc.save(buf)
        data = buf.getvalue()
    except Exception as exc:
        logger.exception("Word generation failed")
        raise DocumentGenerationError("Failed to generate Word document") from exc

    logger.info("Generated Word document (%d bytes)", len(data))
    return data


def build_filename(project_name: str | None, extension: str, now: datetime | None = None) -> str:
    """RAMS_<project name with underscores>_<epoch ms>.<extension>"""
    name = re.sub(r"\s+", "_", (project_name or "").strip()) or "document"
    stamp = int((now or datetime.now(timezone.utc)).timestamp() * 1000)
    return f"RAMS_{name}_{stamp}.{extension}"


def to_data_uri(data: bytes, mime: str) -> str:
    return f"data:{mime};base64,{base64.b64encode(data).decode('ascii')}"


# ---------------------------------------------------------------
# PDF helpers
# ---------------------------------------------------------------


def _pdf_text(text: str) -> str:
    for char, replacement in _PDF_REPLACEMENTS.items():
        text = text.replace(char, replacement)
    return text.encode("latin-1", "replace").decode("latin-1")


def _pdf_section_heading(pdf: FPDF, title: str) -> None:
    pdf.set_font("Helvetica", "B", 12)
    pdf.set_text_color(*NAVY)
    pdf.cell(0, 8, title, new_x="LMARGIN", new_y="NEXT")
    pdf.set_draw_color(*NAVY)
    pdf.line(10, pdf.get_y(), 200, pdf.get_y())
    pdf.ln(3)


def _pdf_field(pdf: FPDF, label: str, value: str) -> None:
    pdf.set_font("Helvetica", "B", 10)
    pdf.set_text_color(*DARK_TEXT)
    pdf.cell(0, 6, f"{label}:", new_x="LMARGIN", new_y="NEXT")
    pdf.set_font("Helvetica", "", 10)
    pdf.multi_cell(0, 5, _pdf_text(value), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)


def _pdf_bullets(pdf: FPDF, items: list[str]) -> None:
    pdf.set_font("Helvetica", "", 10)
    pdf.set_text_color(*DARK_TEXT)
    if not items:
        pdf.cell(0, 6, "None selected", new_x="LMARGIN", new_y="NEXT")
    for item in items:
        pdf.cell(0, 6, _pdf_text(f"  - {item}"), new_x="LMARGIN", new_y="NEXT")
    pdf.ln(2)


# ---------------------------------------------------------------
# DOCX helpers
# ---------------------------------------------------------------


def _docx_text(text: str | None) -> str:
    return _XML_ILLEGAL.sub("", text or "")
