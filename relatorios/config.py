# config.py
import os

import reportlab
from dotenv import load_dotenv

load_dotenv()

REPORTLAB_FONTS_DIR = os.path.join(os.path.dirname(reportlab.__file__), 'fonts')


def _env_int(name, default):
    try:
        return int(os.environ.get(name, default))
    except (TypeError, ValueError):
        return int(default)


def _env_float(name, default):
    try:
        return float(os.environ.get(name, default))
    except (TypeError, ValueError):
        return float(default)


class Config:
    """
    Arquivo central de configuração: todos os parâmetros de fonte, tamanho e
    espaçamento usados no PDF do relatório são ajustados aqui.
    Os serviços leem os valores com getattr(config, NOME, padrão), então uma
    subclasse pode sobrescrever apenas o que precisa (ex.: testes).
    """

    # -------------------------
    # Diretórios / caminhos
    # -------------------------
    BASE_DIR = os.path.dirname(os.path.abspath(__file__))
    PROJECT_DIR = os.path.dirname(BASE_DIR)
    LOG_PATH = os.environ.get('RELATORIOS_LOG_PATH', os.path.join(PROJECT_DIR, 'app.log'))

    # -------------------------
    # Fontes (par regular + bold é obrigatório)
    # -------------------------
    # Caminhos para os arquivos .ttf. Se um caminho for informado e o arquivo
    # não existir, a geração falha antes de criar qualquer página.
    # Deixe os dois vazios para usar as fontes base do PDF (Helvetica).
    # Padrão: par Vera distribuído junto com o reportlab.
    FONT_REGULAR_PATH = os.environ.get('RELATORIOS_FONT_REGULAR', os.path.join(REPORTLAB_FONTS_DIR, 'Vera.ttf'))
    FONT_BOLD_PATH = os.environ.get('RELATORIOS_FONT_BOLD', os.path.join(REPORTLAB_FONTS_DIR, 'VeraBd.ttf'))

    # Nomes usados no registro das TTF
    FONT_REGULAR_NAME = os.environ.get('RELATORIOS_FONT_REGULAR_NAME', 'Relatorio-Regular')
    FONT_BOLD_NAME = os.environ.get('RELATORIOS_FONT_BOLD_NAME', 'Relatorio-Bold')

    # -------------------------
    # Página (pts)
    # -------------------------
    PAGE_MARGIN = 50.0
    FOOTER_RESERVE = 50.0          # altura reservada para o rodapé em toda página
    FOOTER_OFFSET = 40.0           # distância do rodapé até a borda inferior
    FOOTER_MIN_CONTENT_OFFSET = 50.0
    LEADING_RATIO = 1.2            # leading = tamanho * LEADING_RATIO + line_gap

    # -------------------------
    # Cabeçalho
    # -------------------------
    HEADER_TITLE_FONT_SIZE = 24.0
    HEADER_META_FONT_SIZE = 10.0
    HEADER_TYPE_FONT_SIZE = 10.0
    HEADER_RIGHT_COLUMN_WIDTH = 200.0   # espaço deixado à direita do título
    HEADER_NUMBER_LINE_HEIGHT = 15.0
    HEADER_META_LINE_HEIGHT = 15.0
    HEADER_DIVIDER_GAP = 15.0
    HEADER_BOTTOM_GAP = 20.0

    # -------------------------
    # Seções de texto livre
    # -------------------------
    SECTION_TITLE_FONT_SIZE = 14.0
    SECTION_TITLE_HEIGHT = 20.0
    SECTION_BODY_FONT_SIZE = 11.0
    SECTION_BODY_LINE_GAP = 3.0
    SECTION_TRAILING_GAP = 20.0
    GENERAL_NOTES_SPACING = 20.0

    # -------------------------
    # Checklist
    # -------------------------
    CHECKLIST_TITLE_HEIGHT = 25.0
    CHECKLIST_CARD_PADDING = 15.0
    CHECKLIST_TEXT_INDENT = 60.0        # numeração + checkbox
    CHECKLIST_MIN_TEXT_HEIGHT = 20.0
    CHECKLIST_ITEM_GAP = 15.0
    CHECKLIST_NOTE_GAP = 5.0
    CHECKLIST_DESCRIPTION_FONT_SIZE = 11.0
    CHECKLIST_NOTE_FONT_SIZE = 9.0
    CHECKLIST_ORDINAL_FONT_SIZE = 12.0
    CHECKLIST_CHECKBOX_SIZE = 11.0

    # -------------------------
    # Grade de fotos
    # -------------------------
    PHOTO_SECTION_SPACING = 15.0
    PHOTO_TITLE_HEIGHT = 25.0
    PHOTO_TITLE_GAP = 15.0
    PHOTO_GRID_GAP = 25.0
    PHOTO_CARD_PADDING = 8.0
    PHOTO_CARD_BORDER_WIDTH = 1.5
    PHOTO_LEGEND_HEIGHT = 20.0
    PHOTO_LEGEND_FONT_SIZE = 9.0
    PHOTO_ROW_SPACING = 30.0
    PHOTO_ASPECT_RATIO = 0.75           # altura / largura (4:3)
    PHOTO_HERO_WIDTH_RATIO = 0.6
    PHOTO_TRAILING_GAP = 10.0
    PHOTO_LIMIT = _env_int('RELATORIOS_PHOTO_LIMIT', 20)

    # -------------------------
    # Download das fotos (antes da paginação)
    # -------------------------
    PHOTO_FETCH_MAX_WORKERS = _env_int('RELATORIOS_FETCH_WORKERS', 4)
    PHOTO_FETCH_TIMEOUT = _env_float('RELATORIOS_FETCH_TIMEOUT', 20)
    PHOTO_MAX_BYTES = _env_int('RELATORIOS_PHOTO_MAX_BYTES', 10 * 1024 * 1024)
    PHOTO_ALLOWED_SCHEMES = ('http', 'https')

    # -------------------------
    # Saída
    # -------------------------
    # invariant=1 no canvas do ReportLab: mesmo documento => mesmos bytes
    # (exceto o horário impresso no rodapé)
    PDF_INVARIANT = True
    PDF_PAGE_COMPRESSION = 1
    TIMEZONE = os.environ.get('RELATORIOS_TIMEZONE', 'America/Sao_Paulo')

    DEBUG = os.environ.get('FLASK_DEBUG', '').lower() in ('1', 'true', 'yes')
    TESTING = False
