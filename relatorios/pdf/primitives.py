# relatorios/pdf/primitives.py
from reportlab.lib import colors
from reportlab.pdfbase import pdfmetrics

from .measurement import MAX_MEASURE_HEIGHT, make_paragraph

DIVIDER_COLOR = '#cccccc'


def draw_divider(canvas, geometry, y, width=None, color=DIVIDER_COLOR, thickness=1.0):
    """Linha horizontal centralizada na página."""
    width = geometry.content_width if width is None else width
    x0 = (geometry.page_width - width) / 2.0
    pdf_y = geometry.to_pdf_y(y)
    canvas.saveState()
    canvas.setStrokeColor(colors.HexColor(color))
    canvas.setLineWidth(thickness)
    canvas.line(x0, pdf_y, x0 + width, pdf_y)
    canvas.restoreState()


def draw_rect(canvas, geometry, x, y, width, height, fill_color):
    canvas.saveState()
    canvas.setFillColor(colors.HexColor(fill_color))
    canvas.rect(x, geometry.to_pdf_y(y, height), width, height, stroke=0, fill=1)
    canvas.restoreState()


def draw_bordered_rect(canvas, geometry, x, y, width, height,
                       stroke_color='#e0e0e0', fill_color=None, line_width=1.0):
    if fill_color:
        draw_rect(canvas, geometry, x, y, width, height, fill_color)
    canvas.saveState()
    canvas.setStrokeColor(colors.HexColor(stroke_color))
    canvas.setLineWidth(line_width)
    canvas.rect(x, geometry.to_pdf_y(y, height), width, height, stroke=1, fill=0)
    canvas.restoreState()


def draw_paragraph(canvas, geometry, text, style, x, y, width):
    """Desenha o texto com o topo em y e devolve a altura ocupada."""
    if not text:
        return 0.0
    para = make_paragraph(text, style)
    _, h = para.wrap(width, MAX_MEASURE_HEIGHT)
    para.drawOn(canvas, x, geometry.to_pdf_y(y, h))
    return float(h)


def draw_text_line(canvas, geometry, text, font_name, font_size, x, y,
                   color='#000000', align='left', width=0.0):
    """Uma linha de texto com o topo em y; align relativo à caixa [x, x + width]."""
    canvas.saveState()
    canvas.setFont(font_name, font_size)
    canvas.setFillColor(colors.HexColor(color))
    baseline = geometry.to_pdf_y(y) - pdfmetrics.getAscent(font_name, font_size)
    if align == 'right':
        canvas.drawRightString(x + width, baseline, text)
    elif align == 'center':
        canvas.drawCentredString(x + width / 2.0, baseline, text)
    else:
        canvas.drawString(x, baseline, text)
    canvas.restoreState()


def draw_checkbox(canvas, geometry, x, y, size, checked, color):
    """Checkbox vetorial: não depende de glifos (☑/☐) existirem na fonte."""
    bottom = geometry.to_pdf_y(y, size)
    canvas.saveState()
    canvas.setLineWidth(1.2)
    canvas.setStrokeColor(colors.HexColor(color))
    if checked:
        canvas.setFillColor(colors.HexColor(color))
        canvas.rect(x, bottom, size, size, stroke=1, fill=1)
        canvas.setStrokeColor(colors.white)
        canvas.setLineWidth(1.6)
        path = canvas.beginPath()
        path.moveTo(x + size * 0.22, bottom + size * 0.52)
        path.lineTo(x + size * 0.42, bottom + size * 0.28)
        path.lineTo(x + size * 0.80, bottom + size * 0.76)
        canvas.drawPath(path, stroke=1, fill=0)
    else:
        canvas.rect(x, bottom, size, size, stroke=1, fill=0)
    canvas.restoreState()
