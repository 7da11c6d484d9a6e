# relatorios/pdf/footer_drawer.py
from relatorios.utils import format_generated_at

from .primitives import draw_divider, draw_text_line
from .styles_builder import TEXT_MUTED


class FooterDrawer:
    """Rodapé único, desenhado só na última página depois de todo o corpo."""

    def __init__(self, config, font_regular):
        self.FONT_REGULAR = font_regular
        self.FONT_SIZE = 8.0
        self.OFFSET = float(getattr(config, 'FOOTER_OFFSET', 40.0))
        self.MIN_CONTENT_OFFSET = float(getattr(config, 'FOOTER_MIN_CONTENT_OFFSET', 50.0))
        self.TIMEZONE = getattr(config, 'TIMEZONE', None)

    def should_draw(self, geometry, cursor):
        # página só com cabeçalho trivial não recebe rodapé
        return cursor.y > geometry.margin_top + self.MIN_CONTENT_OFFSET

    def footer_text(self, generated_at, page_count):
        return f"Gerado em {format_generated_at(generated_at, self.TIMEZONE)} - Página {page_count}"

    def draw_footer(self, ctx, cursor, generated_at):
        geometry = ctx.geometry
        footer_y = geometry.page_height - self.OFFSET
        draw_divider(ctx.canvas, geometry, footer_y, geometry.content_width)

        text = self.footer_text(generated_at, cursor.page)
        draw_text_line(ctx.canvas, geometry, text, self.FONT_REGULAR, self.FONT_SIZE,
                       geometry.content_left, footer_y + 8, color=TEXT_MUTED,
                       align='center', width=geometry.content_width)
        ctx.record('footer', cursor.page, geometry.content_left, footer_y,
                   geometry.content_width, self.OFFSET, label=text)
        return text
