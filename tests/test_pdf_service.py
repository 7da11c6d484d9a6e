"""Geração completa: ordem das seções, cabeçalho/rodapé, integridade e determinismo."""

import logging
import re
from datetime import datetime

import pytest

from relatorios.exceptions import AssemblerStateError, FontResourceError, IntegrityViolationError
from relatorios.models import ChecklistItem, Photo, ReportStatus
from relatorios.pdf.font_manager import FontManager
from relatorios.pdf.layout import LayoutCursor, PageGeometry
from relatorios.pdf.pdf_service import AssemblerState, DocumentAssembler, PDFService, generate
from relatorios.pdf.footer_drawer import FooterDrawer

PAGE_RE = re.compile(rb'/Type\s*/Page\b')

BODY_KINDS = {'section_title', 'text_section', 'checklist_item', 'photo'}


def _pdf_pages(pdf):
    return len(PAGE_RE.findall(pdf))


def _full_report(make_report, **overrides):
    data = dict(
        items=3,
        photos=5,
        notes=(1,),
        description='Vistoria anual do sistema de propulsão.',
        general_notes='Sem pendências de segurança.',
        conclusion='Embarcação apta a operar.',
        recommendations='Reavaliar em 12 meses.',
    )
    data.update(overrides)
    return make_report(**data)


def test_generate_returns_pdf_bytes(service, make_report, generated_at):
    pdf = service.generate_pdf(make_report(items=2), generated_at=generated_at)
    assert pdf.startswith(b'%PDF')
    assert pdf.rstrip().endswith(b'%%EOF')


def test_sections_in_fixed_order(service, make_report, generated_at):
    result = service.render(_full_report(make_report), generated_at=generated_at)

    titles = [b.label for b in result.boxes('section_title') if 'continuação' not in b.label]
    assert titles == [
        'Descrição do Relatório',
        'Itens do Relatório',
        'Fotos do Relatório',
        'Observações Gerais',
        'Conclusão / Parecer Técnico',
        'Recomendações Finais',
    ]


def test_scenario_three_items_five_photos(service, make_report, generated_at):
    result = service.render(make_report(items=3, photos=5, notes=(0,)), generated_at=generated_at)

    cards = result.boxes('checklist_item')
    assert [c.label.split('.')[0] for c in cards] == ['1', '2', '3']
    photos = result.boxes('photo')
    assert [p.label.split(' — ')[0] for p in photos] == [f'Foto {n}' for n in range(1, 6)]
    assert photos[4].width > photos[0].width


def test_blank_sections_are_skipped(service, make_report, generated_at):
    report = make_report(items=1, description='   ', conclusion='', recommendations=None)
    result = service.render(report, generated_at=generated_at)

    assert [b.label for b in result.boxes('section_title')] == ['Itens do Relatório']
    assert not result.boxes('text_section')


def test_reading_order_is_monotonic(service, make_report, generated_at):
    report = _full_report(make_report, items=25, photos=9, notes=(2, 9))
    result = service.render(report, generated_at=generated_at)

    body = [(b.page, b.y) for b in result.layout if b.kind in BODY_KINDS]
    assert body == sorted(body)
    assert result.page_count > 1


def test_header_repeats_on_every_page(service, make_report, generated_at):
    result = service.render(make_report(items=30, photos=6), generated_at=generated_at)

    headers = result.boxes('header')
    assert [h.page for h in headers] == list(range(1, result.page_count + 1))
    assert len({(h.y, h.height, h.label) for h in headers}) == 1
    assert _pdf_pages(result.pdf) == result.page_count


def test_single_footer_on_last_page(service, make_report, generated_at):
    result = service.render(make_report(items=30), generated_at=generated_at)

    (footer,) = result.boxes('footer')
    assert footer.page == result.page_count
    # 10:30 UTC = 07:30 em São Paulo
    assert footer.label == f'Gerado em 15/03/2024 às 07:30:00 - Página {result.page_count}'


def test_footer_skipped_for_header_only_page():
    footer = FooterDrawer(object(), 'Helvetica')
    geometry = PageGeometry(page_width=595, page_height=842)
    assert not footer.should_draw(geometry, LayoutCursor(y=90))
    assert footer.should_draw(geometry, LayoutCursor(y=120))


@pytest.mark.parametrize('status, label', [
    (ReportStatus.FINAL, 'Finalizado'),
    (ReportStatus.DRAFT, 'Pendente'),
])
def test_status_label_in_header(service, make_report, generated_at, status, label):
    result = service.render(make_report(status=status), generated_at=generated_at)
    assert {b.label for b in result.boxes('header_status')} == {label}


def test_output_is_deterministic(service, make_report, generated_at):
    report = _full_report(make_report)
    first = service.generate_pdf(report, generated_at=generated_at)
    second = service.generate_pdf(report, generated_at=generated_at)
    assert first == second


def test_oversized_description_is_not_split(service, make_report, generated_at, caplog):
    report = make_report(description='palavra ' * 6000)

    with caplog.at_level(logging.WARNING):
        result = service.render(report, generated_at=generated_at)

    (body,) = result.boxes('text_section')
    assert body.page == 1
    assert body.y + body.height > PageGeometry(595.2756, 841.8898).content_bottom
    assert result.page_count == 1
    assert any('excede' in r.getMessage() for r in caplog.records)


def test_integrity_violation_aborts_before_layout(service, make_report, generated_at):
    report = make_report(items=0, photos=0)
    report = report.model_copy(update={
        'items': [ChecklistItem(id='x1', description='Item alheio', report_id='outro')],
        'photos': [Photo(id='f9', name='alheia.png', report_id='outro')],
    })

    with pytest.raises(IntegrityViolationError) as exc_info:
        service.render(report, generated_at=generated_at)

    assert exc_info.value.report_id == 'rel-1'
    assert exc_info.value.item_ids == ['x1']
    assert exc_info.value.photo_ids == ['f9']


def test_children_without_report_id_are_accepted(service, make_report, generated_at):
    report = make_report().model_copy(update={
        'items': [ChecklistItem(description='Sem vínculo')],
    })
    assert service.render(report, generated_at=generated_at).page_count == 1


def test_children_of_different_reports_rejected_without_document_id(service, make_report, generated_at):
    report = make_report(id=None).model_copy(update={
        'items': [
            ChecklistItem(id='a1', description='Do relatório A', report_id='rel-A'),
            ChecklistItem(id='b1', description='Do relatório B', report_id='rel-B'),
        ],
    })

    with pytest.raises(IntegrityViolationError) as exc_info:
        service.render(report, generated_at=generated_at)

    assert exc_info.value.report_id is None
    assert exc_info.value.item_ids == ['b1']


def test_children_of_single_report_accepted_without_document_id(service, make_report, generated_at):
    report = make_report(id=None).model_copy(update={
        'items': [ChecklistItem(description='Item', report_id='rel-A')],
        'photos': [Photo(name='foto.png', report_id='rel-A')],
    })
    assert service.render(report, generated_at=generated_at).page_count == 1


def test_empty_report_renders_single_page(service, make_report, generated_at):
    report = make_report(title='Inspection A', date=datetime(2024, 1, 1), status=ReportStatus.DRAFT,
                         report_number=None)

    result = service.render(report, generated_at=generated_at)

    assert result.page_count == 1
    assert result.boxes('section_title') == []
    assert result.boxes('checklist_item') == []
    assert result.boxes('photo') == []
    assert {b.label for b in result.boxes('header_status')} == {'Pendente'}


def test_missing_font_file_is_fatal(test_config, make_report, tmp_path):
    class MissingFonts(test_config):
        FONT_REGULAR_PATH = str(tmp_path / 'nao-existe.ttf')

    with pytest.raises(FontResourceError):
        PDFService(MissingFonts).render(make_report(items=1))


def test_half_configured_font_pair_is_fatal(test_config, make_report):
    class HalfPair(test_config):
        FONT_BOLD_PATH = ''

    with pytest.raises(FontResourceError):
        PDFService(HalfPair).render(make_report(items=1))


def test_base_fonts_when_no_ttf_configured(test_config, make_report, generated_at):
    class BaseFonts(test_config):
        FONT_REGULAR_PATH = ''
        FONT_BOLD_PATH = ''

    fonts = FontManager(config=BaseFonts)
    assert (fonts.FONT_REGULAR, fonts.FONT_BOLD) == ('Helvetica', 'Helvetica-Bold')
    pdf = PDFService(BaseFonts).generate_pdf(make_report(items=2), generated_at=generated_at)
    assert pdf.startswith(b'%PDF')


def test_assembler_is_single_use(test_config, make_report, generated_at):
    fonts = FontManager(config=test_config)
    assembler = DocumentAssembler(test_config, make_report(items=1), fonts.FONT_REGULAR, fonts.FONT_BOLD,
                                  generated_at)

    assembler.assemble()
    assert assembler.state is AssemblerState.DONE
    with pytest.raises(AssemblerStateError):
        assembler.assemble()


def test_photo_limit(service, make_report, generated_at, caplog):
    with caplog.at_level(logging.WARNING):
        result = service.render(make_report(photos=25), generated_at=generated_at)

    assert len(result.boxes('photo')) == service.PHOTO_LIMIT == 20
    assert any('25 fotos' in r.getMessage() for r in caplog.records)


def test_photo_urls_resolved_before_layout(test_config, make_report, png_bytes, fake_session, fake_response,
                                           generated_at):
    session = fake_session({'https://cdn.exemplo.com/a.png': fake_response(content=png_bytes())})
    report = make_report().model_copy(update={
        'photos': [
            Photo(name='a.png', url='https://cdn.exemplo.com/a.png'),
            Photo(name='b.png', url='https://cdn.exemplo.com/fora-do-ar.png'),
        ],
    })

    result = PDFService(test_config, session=session).render(report, generated_at=generated_at)

    cells = result.boxes('photo')
    assert [c.placeholder for c in cells] == [False, True]
    assert sorted(session.calls) == ['https://cdn.exemplo.com/a.png', 'https://cdn.exemplo.com/fora-do-ar.png']


def test_get_filename(make_report):
    report = make_report(title='Inspeção Nº 7/2024')
    assert PDFService.get_filename(report) == 'relatorio-Inspe__o_N__7_2024.pdf'


def test_module_level_generate(test_config, make_report):
    assert generate(make_report(items=1), config=test_config).startswith(b'%PDF')
