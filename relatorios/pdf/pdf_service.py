import io
import logging
from dataclasses import dataclass, field
from datetime import datetime, timezone
from enum import Enum
from typing import List, Optional

from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from relatorios.config import Config
from relatorios.exceptions import AssemblerStateError, IntegrityViolationError
from relatorios.utils import safe_filename

from .checklist_builder import ChecklistBuilder
from .font_manager import FontManager
from .footer_drawer import FooterDrawer
from .header_drawer import HeaderDrawer
from .image_resolver import PhotoResolver
from .layout import LayoutBox, PageGeometry, RenderContext, open_page
from .photo_grid import PhotoGridBuilder
from .sections_builder import (
    CONCLUSION_TITLE, DESCRIPTION_TITLE, GENERAL_NOTES_TITLE, RECOMMENDATIONS_TITLE, TextSectionBuilder,
)
from .styles_builder import make_styles

logger = logging.getLogger(__name__)


class AssemblerState(Enum):
    NOT_STARTED = 'not_started'
    PAGINATING = 'paginating'
    FINALIZING = 'finalizing'
    DONE = 'done'


@dataclass(frozen=True)
class RenderResult:
    pdf: bytes
    page_count: int
    layout: List[LayoutBox] = field(default_factory=list)

    def boxes(self, kind):
        return [b for b in self.layout if b.kind == kind]


class DocumentAssembler:
    """
    Monta um único documento em uma passada: abre a primeira página, emite as
    seções na ordem fixa e fecha com o rodapé. Uma instância por documento.
    """

    def __init__(self, config, report, font_regular, font_bold, generated_at):
        self.config = config
        self.report = report
        self.font_regular = font_regular
        self.font_bold = font_bold
        self.generated_at = generated_at
        self.state = AssemblerState.NOT_STARTED

    def _transition(self, expected, new_state):
        if self.state != expected:
            raise AssemblerStateError(
                f"Transição inválida {self.state.value} -> {new_state.value} (esperado {expected.value})")
        self.state = new_state

    def _geometry(self):
        page_w, page_h = A4
        margin = float(getattr(self.config, 'PAGE_MARGIN', 50.0))
        return PageGeometry(
            page_width=page_w,
            page_height=page_h,
            margin_top=margin,
            margin_bottom=margin,
            margin_left=margin,
            margin_right=margin,
            footer_reserve=float(getattr(self.config, 'FOOTER_RESERVE', 50.0)),
        )

    def build_context(self, canvas) -> RenderContext:
        return RenderContext(
            canvas=canvas,
            geometry=self._geometry(),
            styles=make_styles(self.config, self.font_regular, self.font_bold),
            config=self.config,
            report=self.report,
            header=HeaderDrawer(self.config, self.font_regular, self.font_bold),
            font_regular=self.font_regular,
            font_bold=self.font_bold,
        )

    def assemble(self) -> RenderResult:
        self._transition(AssemblerState.NOT_STARTED, AssemblerState.PAGINATING)
        config = self.config
        report = self.report

        buffer = io.BytesIO()
        canvas = Canvas(
            buffer,
            pagesize=A4,
            invariant=1 if getattr(config, 'PDF_INVARIANT', True) else 0,
            pageCompression=getattr(config, 'PDF_PAGE_COMPRESSION', 1),
        )
        canvas.setTitle(report.title)
        canvas.setSubject(report.report_type or 'Relatório')

        ctx = self.build_context(canvas)
        geometry = ctx.geometry
        sections = TextSectionBuilder(config, ctx.styles)
        checklist = ChecklistBuilder(config, ctx.styles, self.font_bold)
        photos = PhotoGridBuilder(config, self.font_regular)

        cursor = open_page(ctx, 1)
        cursor = sections.render(ctx, cursor, DESCRIPTION_TITLE, report.description)
        cursor = checklist.render(ctx, cursor, report.items)
        cursor = photos.render(ctx, cursor, report.photos)
        if sections.has_content(report.general_notes):
            cursor = cursor.advance(float(getattr(config, 'GENERAL_NOTES_SPACING', 20.0)))
        cursor = sections.render(ctx, cursor, GENERAL_NOTES_TITLE, report.general_notes)
        cursor = sections.render(ctx, cursor, CONCLUSION_TITLE, report.conclusion)
        cursor = sections.render(ctx, cursor, RECOMMENDATIONS_TITLE, report.recommendations)

        self._transition(AssemblerState.PAGINATING, AssemblerState.FINALIZING)
        footer = FooterDrawer(config, self.font_regular)
        if footer.should_draw(geometry, cursor):
            footer.draw_footer(ctx, cursor, self.generated_at)
        canvas.showPage()
        canvas.save()

        self._transition(AssemblerState.FINALIZING, AssemblerState.DONE)
        return RenderResult(pdf=buffer.getvalue(), page_count=cursor.page, layout=list(ctx.layout))


class PDFService:
    def __init__(self, config=Config, session=None):
        self.config = config
        self.PHOTO_LIMIT = int(getattr(config, 'PHOTO_LIMIT', 20))
        self.resolver = PhotoResolver(config, session=session)

    @staticmethod
    def check_integrity(report):
        """
        Todo item e foto precisa pertencer ao relatório (report_id ausente é aceito).
        Sem id no documento, os filhos ainda precisam apontar para um único relatório.
        """
        parent_id = report.id
        if not parent_id:
            parents = {c.report_id for c in [*report.items, *report.photos] if c.report_id}
            if len(parents) <= 1:
                return
            parent_id = next(c.report_id for c in [*report.items, *report.photos] if c.report_id)
        item_ids = [i.id for i in report.items if i.report_id and i.report_id != parent_id]
        photo_ids = [p.id for p in report.photos if p.report_id and p.report_id != parent_id]
        if item_ids or photo_ids:
            raise IntegrityViolationError(
                f"Relatório {parent_id} contém {len(item_ids)} item(ns) e {len(photo_ids)} foto(s) de outro relatório",
                report_id=report.id, item_ids=item_ids, photo_ids=photo_ids,
            )

    def _limit_photos(self, photos):
        if self.PHOTO_LIMIT > 0 and len(photos) > self.PHOTO_LIMIT:
            logger.warning("Relatório com %d fotos; apenas as %d primeiras entram no PDF",
                           len(photos), self.PHOTO_LIMIT)
            return list(photos[:self.PHOTO_LIMIT])
        return list(photos)

    def render(self, report, generated_at: Optional[datetime] = None) -> RenderResult:
        # pré-condições fatais antes de qualquer página
        fonts = FontManager(config=self.config)
        self.check_integrity(report)

        photos = self.resolver.resolve(self._limit_photos(report.photos))
        report = report.model_copy(update={'photos': photos})

        generated_at = generated_at or datetime.now(timezone.utc)
        assembler = DocumentAssembler(self.config, report, fonts.FONT_REGULAR, fonts.FONT_BOLD, generated_at)
        result = assembler.assemble()
        logger.info("PDF do relatório %s gerado: %d página(s), %d bytes",
                    report.id or report.title, result.page_count, len(result.pdf))
        return result

    def generate_pdf(self, report, generated_at: Optional[datetime] = None) -> bytes:
        return self.render(report, generated_at=generated_at).pdf

    @staticmethod
    def get_filename(report):
        return safe_filename(report.title)


def generate(report, config=Config) -> bytes:
    """Atalho: relatório resolvido -> bytes do PDF."""
    return PDFService(config).generate_pdf(report)
