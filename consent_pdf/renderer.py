"""
Consent document rendering engine using ReportLab.

Lays out a consent record (title, legal clauses, demographic summary,
guardian block and signature) into sealed pages, then writes the pages to
PDF with deterministic output.

License: MIT
"""

import io
import logging
from datetime import datetime
from typing import List as ListType, Optional, Sequence, Tuple

from reportlab.lib.utils import ImageReader
from reportlab.pdfgen import canvas

from consent_pdf.clauses import CONSENT_CLAUSES, ClauseSpec, select_text
from consent_pdf.images import EmbeddedImage, ImageEmbedder
from consent_pdf.layout import (
    Document, ImageElement, LineElement, Page, PageFlowManager, Placement,
    RuleElement, TextRun,
)
from consent_pdf.measure import FontSet, TextMeasurer, default_fonts
from consent_pdf.models import ConsentRecord
from consent_pdf.styles import (
    SIGNATURE_BOX, colors, font_sizes, line_height, page_config, spacing,
)
from consent_pdf.wrap import LineWrapper

logger = logging.getLogger(__name__)

DOCUMENT_TITLE = "CONSENTIMIENTO INFORMADO"
DOCUMENT_SUBTITLE = "Proceso de orientación psicológica"
DOCUMENT_SUBJECT = "Consentimiento informado"
FOOTER_ELLIPSIS = "..."


def format_timestamp(value: datetime) -> str:
    """Format a submission timestamp as dd/mm/yyyy HH:MM, keeping its zone."""
    text = value.strftime("%d/%m/%Y %H:%M")
    if value.tzinfo is not None:
        text = f"{text} {value.strftime('%Z')}"
    return text


class ConsentRenderer:
    """
    Assembles one consent record into a paginated Document.

    All per-document state (cursor, pages) lives in this instance; a renderer
    is used for exactly one document.
    """

    def __init__(self, record: ConsentRecord, font_set: Optional[FontSet] = None,
                 clauses: Sequence[ClauseSpec] = CONSENT_CLAUSES,
                 page_size: str = "A4", margin_mm: float = page_config.default_margin_mm,
                 practice_name: str = ""):
        """
        Initialize renderer with a validated record.

        Args:
            record: Consent record (read-only)
            font_set: Loaded fonts; defaults to the process-wide font set
            clauses: Clause table in legal order
            page_size: "A4" or "LETTER"
            margin_mm: Page margin in millimeters
            practice_name: Shown above the title and stored as PDF author

        Raises:
            RenderIOError: If the fonts cannot be loaded
        """
        self.record = record
        self.fonts = font_set or default_fonts()
        self.clauses = tuple(clauses)
        self.practice_name = practice_name

        # Page configuration
        self.page_width, self.page_height = page_config.size_for(page_size)
        self.margin = page_config.mm_to_points(margin_mm)
        self.x = self.margin
        self.content_width = self.page_width - 2 * self.margin

        self.measurer = TextMeasurer(self.fonts)
        self.wrapper = LineWrapper(self.measurer)
        self.embedder = ImageEmbedder()
        self.flow = PageFlowManager(
            page_height=self.page_height,
            margin_top=self.margin,
            margin_bottom=self.margin,
        )

    def assemble(self) -> Document:
        """
        Lay out the complete document.

        Returns:
            Immutable Document with every sealed page
        """
        self._render_title()

        for number, clause in enumerate(self.clauses, start=1):
            self._render_clause(number, clause)

        self._render_summary()

        if self.record.is_minor:
            self._render_guardian()

        self._render_signature()

        return Document(
            pages=self.flow.finish(),
            page_width=self.page_width,
            page_height=self.page_height,
            margin=self.margin,
            title=f"{DOCUMENT_SUBJECT} - {self.record.demographics.full_name}",
            author=self.practice_name,
            subject=DOCUMENT_SUBJECT,
        )

    def _line(self, text: str, font: str = "regular", size: float = font_sizes.body,
              color: Tuple[float, float, float] = colors.text_primary) -> LineElement:
        return LineElement(runs=(TextRun(text=text, x=self.x, font=font, size=size, color=color),))

    def _place_paragraph(self, text: str, font: str = "regular", size: float = font_sizes.body,
                         color: Tuple[float, float, float] = colors.text_primary):
        """Wrap text at the content width and place it line by line."""
        for line in self.wrapper.wrap(text, font, size, self.content_width):
            self.flow.place(self._line(line.text, font, size, color), line_height(size))

    def _render_title(self):
        """Render the title block."""
        if self.practice_name:
            self._place_paragraph(self.practice_name, "bold", font_sizes.small, colors.brand_teal)

        self._place_paragraph(DOCUMENT_TITLE, "bold", font_sizes.title, colors.text_primary)
        self._place_paragraph(DOCUMENT_SUBTITLE, "regular", font_sizes.subtitle, colors.text_muted)
        self._place_paragraph(
            f"Fecha de diligenciamiento: {format_timestamp(self.record.submitted_at)}",
            "regular", font_sizes.small, colors.text_muted,
        )

        if self.record.is_minor:
            self._place_paragraph(
                "Consultante menor de edad: este consentimiento lo otorga su representante legal.",
                "bold", font_sizes.small, colors.text_muted,
            )

        self.flow.place(RuleElement(x=self.x, width=self.content_width, color=colors.line_light),
                        spacing.rule_height)

    def _render_clause(self, number: int, clause: ClauseSpec):
        """Render one clause, keeping its title with its body."""
        title_lines = self.wrapper.wrap(f"{number}. {clause.title}", "bold",
                                        font_sizes.heading, self.content_width)
        body_lines = self.wrapper.wrap(select_text(clause, self.record.is_minor), "regular",
                                       font_sizes.body, self.content_width)

        title_height = len(title_lines) * line_height(font_sizes.heading) + spacing.clause_title_gap
        body_height = len(body_lines) * line_height(font_sizes.body)

        self.flow.advance(spacing.paragraph_gap)
        self.flow.ensure_space(title_height + body_height)

        for line in title_lines:
            self.flow.place(self._line(line.text, "bold", font_sizes.heading),
                            line_height(font_sizes.heading))

        self.flow.advance(spacing.clause_title_gap)

        for line in body_lines:
            self.flow.place(self._line(line.text), line_height(font_sizes.body))

    def _render_section_heading(self, text: str):
        self.flow.advance(spacing.section_gap)
        # Keep the heading with the first line that follows it
        self.flow.ensure_space(line_height(font_sizes.heading) + spacing.clause_title_gap
                               + line_height(font_sizes.body))
        self.flow.place(self._line(text, "bold", font_sizes.heading, colors.brand_teal),
                        line_height(font_sizes.heading))
        self.flow.advance(spacing.clause_title_gap)

    def _render_field(self, label: str, value: Optional[str]):
        """Render a labeled value; empty values are skipped entirely."""
        if value is None or not str(value).strip():
            return

        value_x = self.x + spacing.label_width
        value_lines = self.wrapper.wrap(str(value), "regular", font_sizes.body,
                                        self.content_width - spacing.label_width)

        for index, line in enumerate(value_lines):
            runs: ListType[TextRun] = []
            if index == 0:
                runs.append(TextRun(text=f"{label}:", x=self.x, font="bold",
                                    size=font_sizes.body, color=colors.text_muted))
            runs.append(TextRun(text=line.text, x=value_x, font="regular",
                                size=font_sizes.body, color=colors.text_primary))
            self.flow.place(LineElement(runs=tuple(runs)), line_height(font_sizes.body))

    def _summary_fields(self) -> ListType[Tuple[str, Optional[str]]]:
        d = self.record.demographics
        return [
            ("Nombre completo", d.full_name),
            ("Tipo de documento", d.id_type),
            ("Número de documento", d.id_number),
            ("Edad", f"{d.age} años"),
            ("Correo electrónico", d.email),
            ("Teléfono", d.phone),
            ("Dirección", d.address),
            ("Ciudad", d.city),
            ("Departamento", d.department),
            ("País", d.country),
            ("Contacto de emergencia", d.emergency_contact_name),
            ("Teléfono de emergencia", d.emergency_contact_phone),
        ]

    def _render_summary(self):
        """Render the demographic summary block."""
        self._render_section_heading("Datos del consultante")
        for label, value in self._summary_fields():
            self._render_field(label, value)

    def _render_guardian(self):
        """Render the legal representative block (minors only)."""
        guardian = self.record.guardian
        self._render_section_heading("Datos del representante legal")
        self._render_field("Nombre", guardian.name)
        self._render_field("Documento", guardian.id_number)
        self._render_field("Parentesco", guardian.relation)

    def _signature_captions(self) -> ListType[str]:
        d = self.record.demographics
        guardian = self.record.guardian
        signed_on = f"Firmado digitalmente el {format_timestamp(self.record.submitted_at)}"
        if guardian is not None:
            return [
                f"Firma del representante legal: {guardian.name}",
                f"Documento: {guardian.id_number}",
                f"En representación de: {d.full_name}",
                signed_on,
            ]
        return [
            f"Firma del consultante: {d.full_name}",
            f"{d.id_type}: {d.id_number}",
            signed_on,
        ]

    def _render_signature(self):
        """Render the signature block, kept together on one page."""
        box_width = page_config.mm_to_points(SIGNATURE_BOX["width_mm"])
        box_height = page_config.mm_to_points(SIGNATURE_BOX["height_mm"])

        signature = self.embedder.embed(self.record.signature_data_uri, box_width, box_height)
        caption_lines = [
            line
            for caption in self._signature_captions()
            for line in self.wrapper.wrap(caption, "regular", font_sizes.small, self.content_width)
        ]

        if isinstance(signature, EmbeddedImage):
            signature_height = signature.height
        else:
            signature_height = line_height(font_sizes.body)

        block_height = (
            line_height(font_sizes.heading)
            + spacing.signature_gap
            + signature_height
            + spacing.rule_height
            + len(caption_lines) * line_height(font_sizes.small)
        )

        self.flow.advance(spacing.section_gap)
        self.flow.ensure_space(block_height)

        self.flow.place(self._line("Firma", "bold", font_sizes.heading, colors.brand_teal),
                        line_height(font_sizes.heading))
        self.flow.advance(spacing.signature_gap)

        if isinstance(signature, EmbeddedImage):
            self.flow.place(
                ImageElement(data=signature.data, x=self.x,
                             width=signature.width, height=signature.height),
                signature.height,
            )
        else:
            logger.info(f"Rendering signature fallback ({signature.reason})")
            self.flow.place(self._line(signature.text, "regular", font_sizes.body, colors.text_muted),
                            signature_height)

        self.flow.place(RuleElement(x=self.x, width=box_width, color=colors.line_strong),
                        spacing.rule_height)

        for line in caption_lines:
            self.flow.place(self._line(line.text, "regular", font_sizes.small, colors.text_muted),
                            line_height(font_sizes.small))


class PDFWriter:
    """Writes a laid-out Document to PDF bytes."""

    def __init__(self, document: Document, font_set: FontSet):
        self.document = document
        self.fonts = font_set
        self.measurer = TextMeasurer(font_set)
        self.buffer = io.BytesIO()

        # Invariant mode drops the creation date and random id so output is reproducible
        self.c = canvas.Canvas(
            self.buffer,
            pagesize=(document.page_width, document.page_height),
            invariant=1,
        )

        if document.title:
            self.c.setTitle(document.title)
        if document.author:
            self.c.setAuthor(document.author)
        if document.subject:
            self.c.setSubject(document.subject)

    def write(self) -> bytes:
        """
        Draw every page and finalize the PDF.

        Returns:
            PDF bytes
        """
        for page in self.document.pages:
            for placement in page.placements:
                self._draw_placement(placement)
            self._draw_footer(page)
            self.c.showPage()

        self.c.save()
        return self.buffer.getvalue()

    def _draw_placement(self, placement: Placement):
        element = placement.element
        if isinstance(element, LineElement):
            self._draw_line(element, placement.top)
        elif isinstance(element, ImageElement):
            self._draw_image(element, placement.bottom)
        elif isinstance(element, RuleElement):
            self._draw_rule(element, placement.top - placement.height / 2)

    def _draw_line(self, line: LineElement, top: float):
        for run in line.runs:
            self.c.setFont(self.fonts.face(run.font), run.size)
            self.c.setFillColorRGB(*run.color)
            self.c.drawString(run.x, top - run.size, run.text)

    def _draw_image(self, image: ImageElement, bottom: float):
        self.c.drawImage(ImageReader(io.BytesIO(image.data)), image.x, bottom,
                         width=image.width, height=image.height, mask='auto')

    def _draw_rule(self, rule: RuleElement, y: float):
        self.c.setStrokeColorRGB(*rule.color)
        self.c.setLineWidth(0.75)
        self.c.line(rule.x, y, rule.x + rule.width, y)

    def footer_title(self, page_label: str) -> str:
        """Document title shortened to fit left of the page number."""
        def width(text: str) -> float:
            return self.measurer.measure(text, "regular", font_sizes.small)

        title = self.document.title
        available = (self.document.page_width - 2 * self.document.margin
                     - width(page_label) - spacing.section_gap)
        if width(title) <= available:
            return title
        while title and width(title.rstrip() + FOOTER_ELLIPSIS) > available:
            title = title[:-1]
        return title.rstrip() + FOOTER_ELLIPSIS if title else ""

    def _draw_footer(self, page: Page):
        """Title and page number inside the bottom margin band."""
        footer_y = page_config.mm_to_points(page_config.footer_offset_mm)
        page_label = f"Página {page.index + 1} de {self.document.page_count}"
        self.c.setFont(self.fonts.face("regular"), font_sizes.small)
        self.c.setFillColorRGB(*colors.text_muted)
        title = self.footer_title(page_label)
        if title:
            self.c.drawString(self.document.margin, footer_y, title)
        self.c.drawRightString(self.document.page_width - self.document.margin, footer_y, page_label)


def write_pdf(document: Document, font_set: FontSet) -> bytes:
    """Serialize a Document to PDF bytes."""
    return PDFWriter(document, font_set).write()


def render_consent(record: ConsentRecord, **options) -> bytes:
    """
    Render a consent record to PDF bytes.

    Args:
        record: Validated consent record
        **options: Passed to ConsentRenderer (font_set, clauses, page_size,
            margin_mm, practice_name)

    Returns:
        PDF bytes

    Raises:
        RenderIOError: If fonts cannot be loaded
        ConfigurationError: If the template uses an unknown weight or size
    """
    renderer = ConsentRenderer(record, **options)
    document = renderer.assemble()
    pdf_bytes = write_pdf(document, renderer.fonts)
    logger.info(f"Rendered consent document with {document.page_count} page(s), {len(pdf_bytes)} bytes")
    return pdf_bytes
