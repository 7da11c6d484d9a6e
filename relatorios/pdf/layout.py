# relatorios/pdf/layout.py
"""
Estado de paginação de uma geração.

Todas as coordenadas verticais de layout são medidas a partir do topo da
página (y cresce para baixo); a conversão para o sistema do ReportLab
(origem no canto inferior esquerdo) acontece só na pintura, via
PageGeometry.to_pdf_y.
"""
import logging
from dataclasses import dataclass, field, replace
from typing import List, Optional

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class PageGeometry:
    page_width: float
    page_height: float
    margin_top: float = 50.0
    margin_bottom: float = 50.0
    margin_left: float = 50.0
    margin_right: float = 50.0
    footer_reserve: float = 50.0

    @property
    def content_left(self) -> float:
        return self.margin_left

    @property
    def content_width(self) -> float:
        return self.page_width - self.margin_left - self.margin_right

    @property
    def content_bottom(self) -> float:
        # último y utilizável antes da reserva de rodapé
        return self.page_height - self.footer_reserve - self.margin_bottom

    def to_pdf_y(self, y: float, height: float = 0.0) -> float:
        """y (a partir do topo) do canto superior -> y do canto inferior no PDF."""
        return self.page_height - y - height


@dataclass(frozen=True)
class LayoutCursor:
    y: float
    page: int = 1
    column: int = 0
    page_top: float = 0.0

    def advance(self, dy: float) -> 'LayoutCursor':
        return replace(self, y=self.y + dy)

    def at(self, y: float) -> 'LayoutCursor':
        return replace(self, y=y)

    def with_column(self, column: int) -> 'LayoutCursor':
        return replace(self, column=column)

    @property
    def at_page_top(self) -> bool:
        return self.y <= self.page_top


@dataclass(frozen=True)
class LayoutBox:
    kind: str
    page: int
    x: float
    y: float
    width: float
    height: float
    label: str = ''
    placeholder: bool = False


@dataclass
class RenderContext:
    """Tudo que os renderizadores precisam para uma única geração."""
    canvas: object
    geometry: PageGeometry
    styles: object
    config: object
    report: object
    header: object
    font_regular: str = 'Helvetica'
    font_bold: str = 'Helvetica-Bold'
    layout: List[LayoutBox] = field(default_factory=list)

    def record(self, kind, page, x, y, width, height, label='', placeholder=False):
        box = LayoutBox(kind, int(page), float(x), float(y), float(width), float(height), label, placeholder)
        self.layout.append(box)
        return box


def open_page(ctx: RenderContext, page: int) -> LayoutCursor:
    """Pinta o cabeçalho na página corrente e devolve o cursor logo abaixo dele."""
    # página recém-criada: fonte ativa precisa ser definida antes de qualquer texto
    ctx.canvas.setFont(ctx.font_regular, 10)
    y = ctx.header.draw_header(ctx, page, ctx.geometry.margin_top)
    return LayoutCursor(y=y, page=page, column=0, page_top=y)


def available_space(geometry: PageGeometry, cursor: LayoutCursor) -> float:
    return geometry.page_height - cursor.y - geometry.footer_reserve - geometry.margin_bottom


def ensure_space(ctx: RenderContext, cursor: LayoutCursor, height_needed: float) -> LayoutCursor:
    """
    Decide, antes de pintar um bloco, se ele cabe na página atual.
    Se não couber, fecha a página, repete o cabeçalho na seguinte e devolve o
    cursor abaixo dele; caso contrário devolve o cursor inalterado.
    Um bloco maior que a área útil é aceito como está (não é fatiado).
    """
    if height_needed <= 0:
        return cursor

    available = available_space(ctx.geometry, cursor)
    if available >= height_needed:
        return cursor

    if cursor.at_page_top:
        # já estamos no topo de uma página: outra quebra só geraria página vazia
        logger.warning("Bloco de %.1fpt excede a área útil da página %d (%.1fpt); desenhando sem quebra",
                       height_needed, cursor.page, available)
        return cursor

    ctx.canvas.showPage()
    new_cursor = open_page(ctx, cursor.page + 1)
    logger.debug("Quebra de página: %d -> %d (necessário %.1fpt, disponível %.1fpt)",
                 cursor.page, new_cursor.page, height_needed, available)
    return new_cursor
