# relatorios/pdf/photo_grid.py
import logging

from reportlab.lib.utils import ImageReader

from .image_manager import IMAGE_ERRORS, fit_inside, load_image
from .layout import ensure_space
from .measurement import fit_single_line
from .primitives import draw_bordered_rect, draw_rect, draw_text_line
from .sections_builder import draw_section_title
from .styles_builder import TEXT_BODY, TEXT_FAINT

logger = logging.getLogger(__name__)

SECTION_TITLE = 'Fotos do Relatório'
CONTINUATION_TITLE = 'Fotos do Relatório (continuação)'
PLACEHOLDER_MISSING = '[Imagem indisponível]'
PLACEHOLDER_BROKEN = '[Erro ao carregar imagem]'

CARD_FILL = '#fafafa'
CARD_BORDER = '#d0d0d0'
PLACEHOLDER_FILL = '#f0f0f0'


class PhotoGridBuilder:
    """
    Grade de fotos em duas colunas. Se a quantidade for ímpar, a última foto
    vira "hero": ocupa sozinha a linha, centralizada e mais larga.
    Uma linha nunca é partida entre páginas.
    """

    COLUMNS = 2

    def __init__(self, config, font_regular):
        self.FONT_REGULAR = font_regular
        self.SECTION_SPACING = float(getattr(config, 'PHOTO_SECTION_SPACING', 15.0))
        self.TITLE_HEIGHT = float(getattr(config, 'PHOTO_TITLE_HEIGHT', 25.0))
        self.TITLE_GAP = float(getattr(config, 'PHOTO_TITLE_GAP', 15.0))
        self.GRID_GAP = float(getattr(config, 'PHOTO_GRID_GAP', 25.0))
        self.CARD_PADDING = float(getattr(config, 'PHOTO_CARD_PADDING', 8.0))
        self.BORDER_WIDTH = float(getattr(config, 'PHOTO_CARD_BORDER_WIDTH', 1.5))
        self.LEGEND_HEIGHT = float(getattr(config, 'PHOTO_LEGEND_HEIGHT', 20.0))
        self.LEGEND_FONT_SIZE = float(getattr(config, 'PHOTO_LEGEND_FONT_SIZE', 9.0))
        self.ROW_SPACING = float(getattr(config, 'PHOTO_ROW_SPACING', 30.0))
        self.ASPECT_RATIO = float(getattr(config, 'PHOTO_ASPECT_RATIO', 0.75))
        self.HERO_WIDTH_RATIO = float(getattr(config, 'PHOTO_HERO_WIDTH_RATIO', 0.6))
        self.TRAILING_GAP = float(getattr(config, 'PHOTO_TRAILING_GAP', 10.0))

    @classmethod
    def is_hero(cls, index, count, column):
        return column == 0 and count % 2 == 1 and index == count - 1

    def cell_width(self, usable_w, hero=False):
        if hero:
            return usable_w * self.HERO_WIDTH_RATIO
        return (usable_w - self.GRID_GAP) / self.COLUMNS

    def image_height(self, cell_w):
        return cell_w * self.ASPECT_RATIO

    def row_height(self, cell_w):
        return self.image_height(cell_w) + self.LEGEND_HEIGHT + self.ROW_SPACING

    @staticmethod
    def legend_text(photo, index):
        name = (photo.name or '').strip()
        return f"Foto {index + 1} — {name}" if name else f"Foto {index + 1}"

    def _draw_placeholder(self, ctx, x, y, w, h, text):
        draw_rect(ctx.canvas, ctx.geometry, x, y, w, h, PLACEHOLDER_FILL)
        draw_text_line(ctx.canvas, ctx.geometry, text, self.FONT_REGULAR, self.LEGEND_FONT_SIZE,
                       x, y + h / 2.0 - self.LEGEND_FONT_SIZE / 2.0, color=TEXT_FAINT,
                       align='center', width=w)

    def _draw_image(self, ctx, photo, x, y, w, h):
        """Desenha a foto contida e centralizada na área. Retorna o texto do placeholder ou None."""
        if not photo.image_data:
            return PLACEHOLDER_MISSING
        try:
            img = load_image(photo.image_data)
        except IMAGE_ERRORS as e:
            logger.warning("Foto %s não pôde ser decodificada: %s", photo.id or photo.name, e)
            return PLACEHOLDER_BROKEN

        draw_w, draw_h = fit_inside(img.width, img.height, w, h)
        off_x = x + (w - draw_w) / 2.0
        off_y = y + (h - draw_h) / 2.0
        ctx.canvas.drawImage(ImageReader(img), off_x, ctx.geometry.to_pdf_y(off_y, draw_h),
                             width=draw_w, height=draw_h)
        return None

    def draw_cell(self, ctx, page, photo, index, x, y, cell_w):
        geometry = ctx.geometry
        image_h = self.image_height(cell_w)
        card_h = image_h + self.LEGEND_HEIGHT

        # o card envolve imagem e legenda
        draw_bordered_rect(ctx.canvas, geometry, x, y, cell_w, card_h,
                           CARD_BORDER, CARD_FILL, self.BORDER_WIDTH)

        inner_x = x + self.CARD_PADDING
        inner_y = y + self.CARD_PADDING
        inner_w = cell_w - 2 * self.CARD_PADDING
        inner_h = image_h - 2 * self.CARD_PADDING

        placeholder = self._draw_image(ctx, photo, inner_x, inner_y, inner_w, inner_h)
        if placeholder:
            self._draw_placeholder(ctx, inner_x, inner_y, inner_w, inner_h, placeholder)

        legend = self.legend_text(photo, index)
        draw_text_line(ctx.canvas, geometry,
                       fit_single_line(legend, self.FONT_REGULAR, self.LEGEND_FONT_SIZE, cell_w),
                       self.FONT_REGULAR, self.LEGEND_FONT_SIZE, x, y + image_h + 5,
                       color=TEXT_BODY, align='center', width=cell_w)

        ctx.record('photo', page, x, y, cell_w, card_h,
                   label=legend, placeholder=bool(placeholder))

    def render(self, ctx, cursor, photos):
        if not photos:
            return cursor

        geometry = ctx.geometry
        usable_w = geometry.content_width
        count = len(photos)

        cursor = cursor.advance(self.SECTION_SPACING)
        first_w = self.cell_width(usable_w, hero=self.is_hero(0, count, 0))
        # título nunca fica sozinho no pé da página
        cursor = ensure_space(ctx, cursor, self.TITLE_HEIGHT + self.TITLE_GAP + self.row_height(first_w))
        cursor = draw_section_title(ctx, cursor, SECTION_TITLE, self.TITLE_HEIGHT)
        cursor = cursor.advance(self.TITLE_GAP).with_column(0)

        row_top = cursor.y
        row_h = 0.0
        for index, photo in enumerate(photos):
            hero = self.is_hero(index, count, cursor.column)
            cell_w = self.cell_width(usable_w, hero)

            if cursor.column == 0:
                page_before = cursor.page
                row_h = self.row_height(cell_w)
                cursor = ensure_space(ctx, cursor, row_h)
                if cursor.page != page_before:
                    cursor = draw_section_title(ctx, cursor, CONTINUATION_TITLE, self.TITLE_HEIGHT)
                    cursor = cursor.advance(self.TITLE_GAP)
                row_top = cursor.y

            if hero:
                x = geometry.content_left + (usable_w - cell_w) / 2.0
            else:
                x = geometry.content_left + cursor.column * (cell_w + self.GRID_GAP)

            self.draw_cell(ctx, cursor.page, photo, index, x, row_top, cell_w)

            next_column = cursor.column + 1
            if hero or next_column >= self.COLUMNS:
                cursor = cursor.at(row_top + row_h).with_column(0)
            else:
                cursor = cursor.with_column(next_column)

        if cursor.column != 0:
            cursor = cursor.at(row_top + row_h).with_column(0)

        logger.debug("Grade de fotos: %d fotos até a página %d", count, cursor.page)
        return cursor.advance(self.TRAILING_GAP)
