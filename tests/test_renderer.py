import pytest

from consent_pdf import renderer as renderer_module
from consent_pdf.clauses import CONSENT_CLAUSES, ClauseSpec, select_text
from consent_pdf.errors import RenderIOError
from consent_pdf.layout import Document, ImageElement, LineElement
from consent_pdf.measure import FontSet, TextMeasurer
from consent_pdf.models import ConsentRecord
from consent_pdf.renderer import ConsentRenderer, PDFWriter, format_timestamp, render_consent, write_pdf
from consent_pdf.styles import FALLBACK_SIGNATURE_TEXT, page_config

from tests.factories import make_payload

SHORT_CLAUSES = (
    ClauseSpec(id="uno", title="Objeto", adult_text="Texto para adultos uno.",
               minor_text="Texto para el menor uno."),
    ClauseSpec(id="dos", title="Datos", adult_text="Texto común dos."),
)


def _assemble(record: ConsentRecord, font_set: FontSet, **options) -> Document:
    return ConsentRenderer(record, font_set=font_set, **options).assemble()


def _joined(document: Document) -> str:
    return " ".join(document.lines())


def _long_clauses(count: int = 4, words: int = 350):
    return tuple(
        ClauseSpec(
            id=f"larga{n}",
            title=f"Cláusula larga {n}",
            adult_text=" ".join(f"c{n}palabra{i}" for i in range(words)),
        )
        for n in range(count)
    )


def test_minor_single_page_with_guardian_block(minor_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(minor_record, font_set, clauses=SHORT_CLAUSES)
    text = _joined(document)

    assert document.page_count == 1
    assert "Texto para el menor uno." in text
    assert "Texto para adultos uno." not in text
    assert "Texto común dos." in text
    assert "Datos del representante legal" in text
    assert "Nombre: Marta Restrepo" in text
    assert "Parentesco: Madre" in text
    assert "Firma del representante legal: Marta Restrepo" in text


def test_adult_never_shows_guardian(font_set: FontSet) -> None:
    record = ConsentRecord.model_validate(
        make_payload(age=34, guardian_name="Persona Ajena", guardian_id="777", guardian_relation="Tío")
    )
    document = _assemble(record, font_set, clauses=SHORT_CLAUSES)
    text = _joined(document)

    assert "Texto para adultos uno." in text
    assert "Texto para el menor uno." not in text
    assert "representante legal" not in text
    assert "Persona Ajena" not in text
    assert "Firma del consultante: Laura Gómez Restrepo" in text


def test_default_table_uses_variant_per_subject(adult_record: ConsentRecord,
                                                minor_record: ConsentRecord,
                                                font_set: FontSet) -> None:
    adult_text = _joined(_assemble(adult_record, font_set))
    minor_text = _joined(_assemble(minor_record, font_set))

    for clause in CONSENT_CLAUSES:
        assert clause.title in adult_text
        assert " ".join(select_text(clause, False).split()) in adult_text
        assert " ".join(select_text(clause, True).split()) in minor_text
        if clause.minor_text:
            assert " ".join(clause.minor_text.split()) not in adult_text


def test_long_clauses_flow_without_loss_or_duplication(adult_record: ConsentRecord,
                                                        font_set: FontSet) -> None:
    clauses = _long_clauses()
    document = _assemble(adult_record, font_set, clauses=clauses)
    text = _joined(document)

    assert document.page_count >= 2
    for clause in clauses:
        assert text.count(clause.adult_text) == 1
    for n in range(len(clauses)):
        assert text.count(f"c{n}palabra0 ") == 1


def test_no_placement_below_bottom_margin(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, clauses=_long_clauses(6, 500))
    top = document.page_height - document.margin

    assert document.page_count > 2
    for page in document.pages:
        assert page.placements
        for placement in page.placements:
            assert not placement.overflow
            assert placement.bottom >= document.margin - 1e-6
            assert placement.top <= top + 1e-6


def test_clause_title_stays_with_body(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, clauses=_long_clauses(5, 120))
    for page in document.pages:
        last = page.placements[-1].element
        if isinstance(last, LineElement):
            assert not last.text.startswith(tuple(f"{n}. Cláusula" for n in range(1, 6)))


def test_empty_fields_are_skipped(font_set: FontSet) -> None:
    record = ConsentRecord.model_validate(make_payload(phone="", address=None, city="  "))
    text = _joined(_assemble(record, font_set, clauses=SHORT_CLAUSES))

    assert "Teléfono:" not in text
    assert "Dirección:" not in text
    assert "Ciudad:" not in text
    assert "Departamento: Antioquia" in text
    assert "Edad: 34 años" in text


def test_long_field_value_wraps_in_value_column(font_set: FontSet) -> None:
    address = "Carrera 43A # 1 Sur 100, Torre Norte, Apartamento 1204, Conjunto Residencial Los Almendros"
    record = ConsentRecord.model_validate(make_payload(address=address))
    document = _assemble(record, font_set, clauses=SHORT_CLAUSES)

    rows = [
        placement.element
        for page in document.pages
        for placement in page.placements
        if isinstance(placement.element, LineElement)
    ]
    start = next(i for i, row in enumerate(rows) if row.text.startswith("Dirección:"))
    continuation = rows[start + 1]
    assert len(continuation.runs) == 1
    assert continuation.runs[0].x == rows[start].runs[1].x
    wrapped = " ".join([rows[start].runs[1].text, continuation.runs[0].text])
    assert address.startswith(wrapped)


def test_valid_signature_is_embedded(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, clauses=SHORT_CLAUSES)
    images = [
        placement.element
        for page in document.pages
        for placement in page.placements
        if isinstance(placement.element, ImageElement)
    ]
    assert len(images) == 1
    assert images[0].width <= page_config.mm_to_points(70) + 1e-6
    assert FALLBACK_SIGNATURE_TEXT not in _joined(document)


@pytest.mark.parametrize("signature", ["", "data:image/png;base64,!!!invalid!!!", "no es una imagen"])
def test_bad_signature_uses_fallback(adult_record: ConsentRecord, font_set: FontSet,
                                     signature: str) -> None:
    record = adult_record.model_copy(update={"signature_data_uri": signature})
    document = _assemble(record, font_set, clauses=SHORT_CLAUSES)

    assert FALLBACK_SIGNATURE_TEXT in document.lines()
    assert not any(
        isinstance(placement.element, ImageElement)
        for page in document.pages
        for placement in page.placements
    )
    assert write_pdf(document, font_set).startswith(b"%PDF")


def test_render_is_deterministic(minor_record: ConsentRecord, font_set: FontSet) -> None:
    first = render_consent(minor_record, font_set=font_set, practice_name="Caminos del Ser")
    second = render_consent(minor_record, font_set=font_set, practice_name="Caminos del Ser")
    assert first == second
    assert first.startswith(b"%PDF")
    assert first.rstrip().endswith(b"%%EOF")


def test_practice_name_and_metadata(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, practice_name="Caminos del Ser")
    assert document.lines()[0] == "Caminos del Ser"
    assert document.author == "Caminos del Ser"
    assert document.title == "Consentimiento informado - Laura Gómez Restrepo"


def test_letter_page_size(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, page_size="LETTER", margin_mm=15)
    assert (document.page_width, document.page_height) == (612.0, 792.0)
    assert document.margin == pytest.approx(page_config.mm_to_points(15))


def test_font_failure_aborts_render(adult_record: ConsentRecord, monkeypatch: pytest.MonkeyPatch) -> None:
    def broken_fonts():
        raise RenderIOError("fonts unavailable")

    monkeypatch.setattr(renderer_module, "default_fonts", broken_fonts)
    with pytest.raises(RenderIOError):
        render_consent(adult_record)


def test_renders_are_independent(adult_record: ConsentRecord, minor_record: ConsentRecord,
                                 font_set: FontSet) -> None:
    solo = _assemble(adult_record, font_set)
    _assemble(minor_record, font_set)
    again = _assemble(adult_record, font_set)
    assert solo == again


def test_format_timestamp(adult_record: ConsentRecord) -> None:
    assert format_timestamp(adult_record.submitted_at).startswith("14/03/2025 10:30")


def test_long_signer_names_stay_inside_content_width(font_set: FontSet,
                                                    measurer: TextMeasurer) -> None:
    record = ConsentRecord.model_validate(make_payload(age=15, guardian_name="María de los Ángeles " * 6))
    document = _assemble(record, font_set, clauses=SHORT_CLAUSES)
    right_edge = document.page_width - document.margin

    runs = [
        run
        for page in document.pages
        for placement in page.placements
        if isinstance(placement.element, LineElement)
        for run in placement.element.runs
    ]
    overflowing = [
        run.text for run in runs
        if run.x + measurer.measure(run.text, run.font, run.size) > right_edge + 1e-6
    ]
    assert overflowing == []
    text = _joined(document)
    assert "Firma del representante legal: " + " ".join(("María de los Ángeles " * 6).split()) in text


def test_signature_block_with_wrapped_captions_stays_together(font_set: FontSet) -> None:
    record = ConsentRecord.model_validate(make_payload(age=15, guardian_name="María de los Ángeles " * 6))
    document = _assemble(record, font_set, clauses=_long_clauses(3, 420))

    last_page = document.pages[-1]
    texts = [p.element.text for p in last_page.placements if isinstance(p.element, LineElement)]
    assert "Firma" in texts
    assert texts[-1].startswith("Firmado digitalmente el")


def test_footer_title_fits_beside_page_number(font_set: FontSet, measurer: TextMeasurer) -> None:
    record = ConsentRecord.model_validate(make_payload(full_name="Alejandra Valentina " * 8))
    document = _assemble(record, font_set, clauses=SHORT_CLAUSES)
    writer = PDFWriter(document, font_set)

    page_label = "Página 1 de 1"
    title = writer.footer_title(page_label)
    title_width = measurer.measure(title, "regular", 8)
    label_width = measurer.measure(page_label, "regular", 8)

    assert title.startswith("Consentimiento informado - Alejandra")
    assert title.endswith("...")
    assert document.margin + title_width < document.page_width - document.margin - label_width


def test_short_footer_title_is_unchanged(adult_record: ConsentRecord, font_set: FontSet) -> None:
    document = _assemble(adult_record, font_set, clauses=SHORT_CLAUSES)
    assert PDFWriter(document, font_set).footer_title("Página 1 de 1") == document.title
