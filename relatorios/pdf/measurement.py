# relatorios/pdf/measurement.py
from reportlab.pdfbase.pdfmetrics import stringWidth
from reportlab.platypus import Paragraph

from .styles_builder import text_style
from .utils import sanitize_for_paragraph

# wrap() exige uma altura máxima; usamos um valor que nenhum bloco atinge
MAX_MEASURE_HEIGHT = 1.0e6


def make_paragraph(text, style):
    return Paragraph(sanitize_for_paragraph(text), style)


def measure_paragraph(text, style, width):
    """Altura do texto quebrado em `width` com o estilo dado. Não desenha nada."""
    if not text:
        return 0.0
    _, h = make_paragraph(text, style).wrap(width, MAX_MEASURE_HEIGHT)
    return float(h)


def measure_height(text, font_name, font_size, width, alignment='left', line_gap=0.0):
    return measure_paragraph(text, text_style(font_name, float(font_size), alignment, float(line_gap)), width)


def fit_single_line(text, font_name, font_size, max_width, ellipsis='…'):
    """Trunca com reticências até caber em uma linha de max_width."""
    text = (text or '').strip()
    if stringWidth(text, font_name, font_size) <= max_width:
        return text
    while text and stringWidth(text + ellipsis, font_name, font_size) > max_width:
        text = text[:-1]
    return (text.rstrip() + ellipsis) if text else ''
