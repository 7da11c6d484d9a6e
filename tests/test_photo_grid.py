"""Grade de fotos: duas colunas, célula hero para a última foto ímpar, linhas inteiras por página."""

import logging

import pytest

from relatorios.models import Photo
from relatorios.pdf.photo_grid import CONTINUATION_TITLE, SECTION_TITLE, PhotoGridBuilder


def _builder(ctx):
    return PhotoGridBuilder(ctx.config, ctx.font_regular)


def _photos(ctx):
    return [b for b in ctx.layout if b.kind == 'photo']


@pytest.mark.parametrize('index, count, column, expected', [
    (4, 5, 0, True),
    (0, 1, 0, True),
    (3, 4, 1, False),
    (2, 5, 0, False),
    (4, 5, 1, False),
])
def test_hero_rule(index, count, column, expected):
    assert PhotoGridBuilder.is_hero(index, count, column) is expected


def test_five_photos_two_rows_and_centred_hero(make_context, make_report):
    report = make_report(photos=5)
    ctx, cursor = make_context(report)
    builder = _builder(ctx)

    builder.render(ctx, cursor, report.photos)

    cells = _photos(ctx)
    assert [c.label for c in cells] == [f'Foto {n} — foto_{n}.png' for n in range(1, 6)]
    assert cells[0].y == cells[1].y
    assert cells[2].y == cells[3].y
    assert cells[2].y > cells[0].y
    assert cells[4].y > cells[2].y or cells[4].page > cells[2].page

    usable = ctx.geometry.content_width
    regular_w = (usable - builder.GRID_GAP) / 2
    for cell in cells[:4]:
        assert cell.width == pytest.approx(regular_w)
    hero = cells[4]
    assert hero.width == pytest.approx(usable * 0.6)
    hero_centre = hero.x + hero.width / 2
    assert hero_centre == pytest.approx(ctx.geometry.content_left + usable / 2)
    # 4:3: altura da imagem = largura * 0.75
    assert hero.height == pytest.approx(hero.width * 0.75 + builder.LEGEND_HEIGHT)


def test_even_count_has_no_hero(make_context, make_report):
    report = make_report(photos=4)
    ctx, cursor = make_context(report)

    _builder(ctx).render(ctx, cursor, report.photos)

    widths = {round(c.width, 3) for c in _photos(ctx)}
    assert len(widths) == 1


def test_single_photo_is_hero(make_context, make_report):
    report = make_report(photos=1)
    ctx, cursor = make_context(report)

    _builder(ctx).render(ctx, cursor, report.photos)

    (cell,) = _photos(ctx)
    assert cell.width == pytest.approx(ctx.geometry.content_width * 0.6)


def test_missing_and_broken_images_become_placeholders(make_context, make_report, caplog):
    photos = [
        Photo(name='sem_dados.jpg'),
        Photo(name='corrompida.jpg', image_data=b'isto nao e uma imagem'),
    ]
    report = make_report()
    ctx, cursor = make_context(report)

    with caplog.at_level(logging.WARNING):
        _builder(ctx).render(ctx, cursor, photos)

    cells = _photos(ctx)
    assert len(cells) == 2
    assert all(c.placeholder for c in cells)
    assert any('corrompida' in r.getMessage() or 'decodificada' in r.getMessage() for r in caplog.records)


def test_rows_never_split_across_pages(make_context, make_report):
    report = make_report(photos=20)
    ctx, cursor = make_context(report)

    end = _builder(ctx).render(ctx, cursor, report.photos)

    cells = _photos(ctx)
    assert len(cells) == 20
    assert end.page > 1
    for left, right in zip(cells[0::2], cells[1::2]):
        assert (left.page, left.y) == (right.page, right.y)
    for cell in cells:
        assert cell.y + cell.height <= ctx.geometry.content_bottom


def test_continuation_title_after_break(make_context, make_report):
    report = make_report(photos=12)
    ctx, cursor = make_context(report)

    _builder(ctx).render(ctx, cursor, report.photos)

    titles = [b for b in ctx.layout if b.kind == 'section_title']
    assert titles[0].label == SECTION_TITLE
    continuation = [t for t in titles if t.label == CONTINUATION_TITLE]
    assert continuation
    assert all(t.page > 1 for t in continuation)


def test_legend_without_name(make_context, make_report):
    assert PhotoGridBuilder.legend_text(Photo(), 6) == 'Foto 7'


def test_no_photos_keeps_cursor(make_context, make_report):
    ctx, cursor = make_context(make_report())
    assert _builder(ctx).render(ctx, cursor, []) == cursor


def test_card_border_encloses_legend(make_context, make_report, monkeypatch):
    drawn = []
    monkeypatch.setattr('relatorios.pdf.photo_grid.draw_bordered_rect',
                        lambda canvas, geometry, x, y, w, h, *args: drawn.append((x, y, w, h)))
    report = make_report(photos=3)
    ctx, cursor = make_context(report)
    builder = _builder(ctx)

    builder.render(ctx, cursor, report.photos)

    cells = _photos(ctx)
    assert len(drawn) == len(cells) == 3
    for (x, y, w, h), cell in zip(drawn, cells):
        assert h == builder.image_height(w) + builder.LEGEND_HEIGHT
        assert (x, y, w, h) == (cell.x, cell.y, cell.width, cell.height)
