# relatorios/pdf/font_manager.py
import logging
import os

from reportlab.pdfbase import pdfmetrics
from reportlab.pdfbase.ttfonts import TTFError, TTFont

from relatorios.exceptions import FontResourceError

logger = logging.getLogger(__name__)

BASE_FONT_REGULAR = 'Helvetica'
BASE_FONT_BOLD = 'Helvetica-Bold'


class FontManager:
    """
    FontManager registra o par de fontes TTF (regular + bold) configurado.
    Uso:
        fm = FontManager(config=Config)
        # então use fm.FONT_REGULAR e fm.FONT_BOLD nos styles

    Diferente de um fallback silencioso, fonte configurada e ausente é erro
    fatal: as medições de altura dependem das métricas da fonte que será
    usada na pintura.
    """
    def __init__(self, config=None):
        self.FONT_REGULAR = BASE_FONT_REGULAR
        self.FONT_BOLD = BASE_FONT_BOLD
        self._setup_fonts(config)

    def _setup_fonts(self, config=None):
        reg_path = getattr(config, 'FONT_REGULAR_PATH', None) if config is not None else None
        bold_path = getattr(config, 'FONT_BOLD_PATH', None) if config is not None else None
        reg_name = getattr(config, 'FONT_REGULAR_NAME', 'Roboto')
        bold_name = getattr(config, 'FONT_BOLD_NAME', 'Roboto-Bold')

        if not reg_path and not bold_path:
            # sem TTF configurada: fontes base do PDF (sempre disponíveis)
            logger.info("Nenhuma fonte TTF configurada; usando %s/%s", BASE_FONT_REGULAR, BASE_FONT_BOLD)
            return

        if not reg_path or not bold_path:
            raise FontResourceError("Configure FONT_REGULAR_PATH e FONT_BOLD_PATH juntos (par regular + bold)")

        self.FONT_REGULAR = self._register(reg_name, reg_path)
        self.FONT_BOLD = self._register(bold_name, bold_path)

    @staticmethod
    def _register(name, path):
        path = os.path.abspath(path)
        if not os.path.exists(path):
            raise FontResourceError(
                f"Fonte {name} não encontrada em {path}. A geração de PDF requer este arquivo.")

        # registro é global no pdfmetrics; reaproveita se já feito com o mesmo arquivo
        existing = pdfmetrics.getFont(name) if name in pdfmetrics.getRegisteredFontNames() else None
        if existing is not None and getattr(getattr(existing, 'face', None), 'filename', None) == path:
            return name

        try:
            pdfmetrics.registerFont(TTFont(name, path))
        except (TTFError, OSError) as e:
            raise FontResourceError(f"Falha ao registrar a fonte {name} ({path}): {e}") from e
        logger.info("Fonte %s registrada a partir de %s", name, path)
        return name
