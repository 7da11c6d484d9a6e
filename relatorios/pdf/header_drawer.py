# relatorios/pdf/header_drawer.py
from relatorios.models import ReportStatus
from relatorios.utils import format_date_br

from .primitives import draw_divider, draw_paragraph, draw_text_line
from .styles_builder import STATUS_FINAL, TEXT_MUTED


class HeaderDrawer:
    """
    Cabeçalho repetido em toda página: número do relatório (opcional), título
    em destaque à esquerda e Data/Status empilhados à direita, seguidos de
    uma linha divisória. Sempre desenha o mesmo conteúdo para o mesmo
    relatório, em qualquer página.
    """

    def __init__(self, config, font_regular, font_bold):
        self.config = config
        self.FONT_REGULAR = font_regular
        self.FONT_BOLD = font_bold

        self.META_FONT_SIZE = float(getattr(config, 'HEADER_META_FONT_SIZE', 10.0))
        self.RIGHT_COLUMN_WIDTH = float(getattr(config, 'HEADER_RIGHT_COLUMN_WIDTH', 200.0))
        self.NUMBER_LINE_HEIGHT = float(getattr(config, 'HEADER_NUMBER_LINE_HEIGHT', 15.0))
        self.META_LINE_HEIGHT = float(getattr(config, 'HEADER_META_LINE_HEIGHT', 15.0))
        self.DIVIDER_GAP = float(getattr(config, 'HEADER_DIVIDER_GAP', 15.0))
        self.BOTTOM_GAP = float(getattr(config, 'HEADER_BOTTOM_GAP', 20.0))

    @staticmethod
    def status_style(status):
        status = ReportStatus(status)
        return status.label, STATUS_FINAL if status is ReportStatus.FINAL else TEXT_MUTED

    def draw_header(self, ctx, page, y):
        """Desenha o cabeçalho com topo em y. Retorna o y logo abaixo do bloco."""
        canvas = ctx.canvas
        geometry = ctx.geometry
        report = ctx.report
        styles = ctx.styles

        left_x = geometry.content_left
        usable_w = geometry.content_width
        title_w = max(50.0, usable_w - self.RIGHT_COLUMN_WIDTH)

        title_y = y
        if report.report_number:
            draw_text_line(canvas, geometry, f"Nº: {report.report_number}",
                           self.FONT_REGULAR, self.META_FONT_SIZE, left_x, title_y, color=TEXT_MUTED)
            title_y += self.NUMBER_LINE_HEIGHT

        title_h = draw_paragraph(canvas, geometry, report.title, styles['header_title'], left_x, title_y, title_w)
        left_h = title_h
        if report.report_type:
            left_h += 2 + draw_paragraph(canvas, geometry, report.report_type, styles['header_type'],
                                         left_x, title_y + title_h + 2, title_w)

        # Data e Status alinhados à direita, na mesma linha do título
        right_x = left_x + usable_w - 150
        draw_text_line(canvas, geometry, 'Data:', self.FONT_REGULAR, self.META_FONT_SIZE,
                       right_x, title_y, color=TEXT_MUTED, align='right', width=70)
        draw_text_line(canvas, geometry, format_date_br(report.date), self.FONT_BOLD, self.META_FONT_SIZE,
                       right_x + 75, title_y)

        status_y = title_y + self.META_LINE_HEIGHT
        status_text, status_color = self.status_style(report.status)
        draw_text_line(canvas, geometry, 'Status:', self.FONT_REGULAR, self.META_FONT_SIZE,
                       right_x, status_y, color=TEXT_MUTED, align='right', width=70)
        draw_text_line(canvas, geometry, status_text, self.FONT_BOLD, self.META_FONT_SIZE,
                       right_x + 75, status_y, color=status_color)

        # altura = o maior entre coluna do título e coluna de data/status
        header_h = max(left_h, status_y + self.META_LINE_HEIGHT - title_y)
        divider_y = title_y + header_h + self.DIVIDER_GAP
        draw_divider(canvas, geometry, divider_y, usable_w)

        ctx.record('header', page, left_x, y, usable_w, divider_y - y, label=report.title)
        ctx.record('header_status', page, right_x + 75, status_y, 75, self.META_LINE_HEIGHT, label=status_text)
        return divider_y + self.BOTTOM_GAP
