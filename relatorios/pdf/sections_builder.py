# relatorios/pdf/sections_builder.py
from .layout import ensure_space
from .measurement import measure_paragraph
from .primitives import draw_paragraph

DESCRIPTION_TITLE = 'Descrição do Relatório'
GENERAL_NOTES_TITLE = 'Observações Gerais'
CONCLUSION_TITLE = 'Conclusão / Parecer Técnico'
RECOMMENDATIONS_TITLE = 'Recomendações Finais'


def draw_section_title(ctx, cursor, title, line_height):
    """Título de seção em negrito; avança o cursor em line_height."""
    geometry = ctx.geometry
    draw_paragraph(ctx.canvas, geometry, title, ctx.styles['section_title'],
                   geometry.content_left, cursor.y, geometry.content_width)
    ctx.record('section_title', cursor.page, geometry.content_left, cursor.y,
               geometry.content_width, line_height, label=title)
    return cursor.advance(line_height)


class TextSectionBuilder:
    """Seções de texto livre: título + corpo justificado, nunca partidas entre páginas."""

    def __init__(self, config, styles):
        self.styles = styles
        self.TITLE_HEIGHT = float(getattr(config, 'SECTION_TITLE_HEIGHT', 20.0))
        self.TRAILING_GAP = float(getattr(config, 'SECTION_TRAILING_GAP', 20.0))

    @staticmethod
    def has_content(text):
        return bool(text and str(text).strip())

    def required_height(self, text, usable_w):
        body_h = measure_paragraph(text.strip(), self.styles['section_body'], usable_w)
        return self.TITLE_HEIGHT + body_h + self.TRAILING_GAP, body_h

    def render(self, ctx, cursor, title, text):
        if not self.has_content(text):
            return cursor

        geometry = ctx.geometry
        text = text.strip()
        total_h, body_h = self.required_height(text, geometry.content_width)
        cursor = ensure_space(ctx, cursor, total_h)

        cursor = draw_section_title(ctx, cursor, title, self.TITLE_HEIGHT)
        draw_paragraph(ctx.canvas, geometry, text, self.styles['section_body'],
                       geometry.content_left, cursor.y, geometry.content_width)
        ctx.record('text_section', cursor.page, geometry.content_left, cursor.y,
                   geometry.content_width, body_h, label=title)
        return cursor.advance(body_h + self.TRAILING_GAP)
