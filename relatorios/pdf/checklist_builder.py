# relatorios/pdf/checklist_builder.py
import logging

from .layout import ensure_space
from .measurement import measure_paragraph
from .primitives import draw_bordered_rect, draw_checkbox, draw_paragraph, draw_text_line
from .sections_builder import draw_section_title
from .styles_builder import STATUS_FINAL, TEXT_FAINT, TEXT_MUTED

logger = logging.getLogger(__name__)

SECTION_TITLE = 'Itens do Relatório'


class ChecklistBuilder:
    """
    Cards numerados do checklist. A numeração é sempre a posição (1-based) na
    lista recebida; o campo `order` persistido não é consultado.
    """

    def __init__(self, config, styles, font_bold):
        self.styles = styles
        self.FONT_BOLD = font_bold
        self.TITLE_HEIGHT = float(getattr(config, 'CHECKLIST_TITLE_HEIGHT', 25.0))
        self.CARD_PADDING = float(getattr(config, 'CHECKLIST_CARD_PADDING', 15.0))
        self.TEXT_INDENT = float(getattr(config, 'CHECKLIST_TEXT_INDENT', 60.0))
        self.MIN_TEXT_HEIGHT = float(getattr(config, 'CHECKLIST_MIN_TEXT_HEIGHT', 20.0))
        self.ITEM_GAP = float(getattr(config, 'CHECKLIST_ITEM_GAP', 15.0))
        self.NOTE_GAP = float(getattr(config, 'CHECKLIST_NOTE_GAP', 5.0))
        self.ORDINAL_FONT_SIZE = float(getattr(config, 'CHECKLIST_ORDINAL_FONT_SIZE', 12.0))
        self.CHECKBOX_SIZE = float(getattr(config, 'CHECKLIST_CHECKBOX_SIZE', 11.0))

    def text_width(self, usable_w):
        return max(20.0, usable_w - 2 * self.CARD_PADDING - self.TEXT_INDENT)

    @staticmethod
    def note_text(item):
        return f"Obs: {item.note}" if item.note else ''

    def measure_card(self, item, usable_w):
        """(altura do card, altura da descrição, altura da observação)."""
        width = self.text_width(usable_w)
        desc_h = measure_paragraph(item.description, self.styles['item_description'], width)
        note_h = 0.0
        if item.has_note:
            note_h = measure_paragraph(self.note_text(item), self.styles['item_note'], width)
        card_h = 2 * self.CARD_PADDING + max(desc_h, self.MIN_TEXT_HEIGHT)
        if note_h:
            card_h += self.NOTE_GAP + note_h
        return card_h, desc_h, note_h

    def draw_card(self, ctx, cursor, item, index):
        """Pinta o card com topo em cursor.y e devolve o cursor após o espaçamento."""
        canvas = ctx.canvas
        geometry = ctx.geometry
        left_x = geometry.content_left
        usable_w = geometry.content_width
        card_h, desc_h, note_h = self.measure_card(item, usable_w)
        top = cursor.y

        draw_bordered_rect(canvas, geometry, left_x, top, usable_w, card_h, '#e0e0e0', '#fafafa', 1)

        ordinal = f"{index + 1}."
        draw_text_line(canvas, geometry, ordinal, self.FONT_BOLD, self.ORDINAL_FONT_SIZE,
                       left_x + self.CARD_PADDING, top + self.CARD_PADDING, color=TEXT_MUTED)

        checkbox_x = left_x + self.CARD_PADDING + 35
        draw_checkbox(canvas, geometry, checkbox_x, top + self.CARD_PADDING, self.CHECKBOX_SIZE,
                      item.completed, STATUS_FINAL if item.completed else TEXT_FAINT)

        text_x = left_x + self.CARD_PADDING + self.TEXT_INDENT
        width = self.text_width(usable_w)
        desc_y = top + self.CARD_PADDING
        draw_paragraph(canvas, geometry, item.description, self.styles['item_description'], text_x, desc_y, width)
        if item.has_note:
            draw_paragraph(canvas, geometry, self.note_text(item), self.styles['item_note'],
                           text_x, desc_y + desc_h + self.NOTE_GAP, width)

        ctx.record('checklist_item', cursor.page, left_x, top, usable_w, card_h,
                   label=f"{ordinal} {item.description}")
        return cursor.at(top + card_h + self.ITEM_GAP)

    def render(self, ctx, cursor, items):
        if not items:
            return cursor

        usable_w = ctx.geometry.content_width
        first_card_h, _, _ = self.measure_card(items[0], usable_w)
        # título acompanha o primeiro card para não ficar órfão no pé da página
        cursor = ensure_space(ctx, cursor, self.TITLE_HEIGHT + first_card_h + self.ITEM_GAP)
        cursor = draw_section_title(ctx, cursor, SECTION_TITLE, self.TITLE_HEIGHT)

        for index, item in enumerate(items):
            card_h, _, _ = self.measure_card(item, usable_w)
            cursor = ensure_space(ctx, cursor, card_h + self.ITEM_GAP)
            cursor = self.draw_card(ctx, cursor, item, index)

        logger.debug("Checklist: %d itens até a página %d", len(items), cursor.page)
        return cursor
