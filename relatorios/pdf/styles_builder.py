# relatorios/pdf/styles_builder.py
from functools import lru_cache

from reportlab.lib import colors
from reportlab.lib.enums import TA_CENTER, TA_JUSTIFY, TA_LEFT, TA_RIGHT
from reportlab.lib.styles import ParagraphStyle, StyleSheet1

ALIGNMENTS = {
    'left': TA_LEFT,
    'center': TA_CENTER,
    'right': TA_RIGHT,
    'justify': TA_JUSTIFY,
}

DEFAULT_LEADING_RATIO = 1.2

# cores usadas no relatório
TEXT_DARK = '#1a1a1a'
TEXT_BODY = '#333333'
TEXT_MUTED = '#666666'
TEXT_FAINT = '#999999'
STATUS_FINAL = '#2d5016'


def _num(x, fallback):
    try:
        if x is None:
            return float(fallback)
        return float(x)
    except (TypeError, ValueError):
        return float(fallback)


@lru_cache(maxsize=256)
def text_style(font_name, font_size, alignment='left', line_gap=0.0,
               color=TEXT_BODY, leading_ratio=DEFAULT_LEADING_RATIO):
    """
    Estilo de parágrafo derivado só dos argumentos. Medição e pintura montam
    o Paragraph a partir do mesmo estilo, então a altura prevista é a altura
    desenhada.
    """
    size = float(font_size)
    name = f"rel_{font_name}_{size:g}_{alignment}_{float(line_gap):g}_{color}_{float(leading_ratio):g}"
    return ParagraphStyle(
        name=name,
        fontName=font_name,
        fontSize=size,
        leading=size * float(leading_ratio) + float(line_gap),
        alignment=ALIGNMENTS.get(alignment, TA_LEFT),
        textColor=colors.HexColor(color),
        spaceBefore=0,
        spaceAfter=0,
    )


def make_styles(config, font_regular, font_bold):
    """
    Cria e retorna o StyleSheet com os estilos nomeados do relatório.
    Tamanhos e espaçamentos vêm do config (ver Config).
    """
    ratio = _num(getattr(config, 'LEADING_RATIO', DEFAULT_LEADING_RATIO), DEFAULT_LEADING_RATIO)

    def sz(name, fallback):
        return _num(getattr(config, name, fallback), fallback)

    styles = StyleSheet1()

    def add(alias, font_name, font_size, alignment='left', line_gap=0.0, color=TEXT_BODY):
        base = text_style(font_name, font_size, alignment, line_gap, color, ratio)
        styles.add(ParagraphStyle(name=alias, parent=base))

    # cabeçalho
    add('header_title', font_bold, sz('HEADER_TITLE_FONT_SIZE', 24), color=TEXT_DARK)
    add('header_type', font_regular, sz('HEADER_TYPE_FONT_SIZE', 10), color=TEXT_MUTED)

    # seções
    add('section_title', font_bold, sz('SECTION_TITLE_FONT_SIZE', 14))
    add('section_body', font_regular, sz('SECTION_BODY_FONT_SIZE', 11), alignment='justify',
        line_gap=sz('SECTION_BODY_LINE_GAP', 3))

    # checklist
    add('item_description', font_bold, sz('CHECKLIST_DESCRIPTION_FONT_SIZE', 11))
    add('item_note', font_regular, sz('CHECKLIST_NOTE_FONT_SIZE', 9), color=TEXT_MUTED)

    return styles
