"""
Configuração do pytest para o serviço de relatórios
"""

import io
import logging
import os
import sys
import threading
import time
from datetime import datetime, timezone

import pytest
import reportlab
import requests
from PIL import Image
from reportlab.lib.pagesizes import A4
from reportlab.pdfgen.canvas import Canvas

from relatorios.config import Config
from relatorios.models import ChecklistItem, Photo, ReportDocument, ReportStatus
from relatorios.pdf.font_manager import FontManager
from relatorios.pdf.layout import open_page
from relatorios.pdf.pdf_service import DocumentAssembler, PDFService

FONTS_DIR = os.path.join(os.path.dirname(reportlab.__file__), 'fonts')

GENERATED_AT = datetime(2024, 3, 15, 10, 30, 0, tzinfo=timezone.utc)


class TestConfig(Config):
    __test__ = False

    TESTING = True
    FONT_REGULAR_PATH = os.path.join(FONTS_DIR, 'Vera.ttf')
    FONT_BOLD_PATH = os.path.join(FONTS_DIR, 'VeraBd.ttf')
    FONT_REGULAR_NAME = 'Teste-Regular'
    FONT_BOLD_NAME = 'Teste-Bold'
    PHOTO_FETCH_MAX_WORKERS = 2
    PHOTO_FETCH_TIMEOUT = 1
    TIMEZONE = 'America/Sao_Paulo'


@pytest.fixture(autouse=True)
def configure_logging():
    """Só avisos e erros no console durante os testes."""
    root_logger = logging.getLogger()
    root_logger.handlers.clear()

    console_handler = logging.StreamHandler(sys.stdout)
    console_handler.setLevel(logging.WARNING)
    console_handler.setFormatter(logging.Formatter('%(name)s - %(levelname)s - %(message)s'))

    root_logger.addHandler(console_handler)
    root_logger.setLevel(logging.WARNING)

    yield

    root_logger.handlers.clear()


@pytest.fixture
def test_config():
    return TestConfig


@pytest.fixture
def png_bytes():
    """Fábrica de PNGs em memória: png_bytes(largura, altura, cor)."""
    def _make(width=40, height=30, color=(200, 80, 40), mode='RGB', fmt='PNG'):
        img = Image.new(mode, (width, height), color)
        buf = io.BytesIO()
        img.save(buf, format=fmt)
        return buf.getvalue()
    return _make


@pytest.fixture
def make_report(png_bytes):
    """Fábrica de ReportDocument com n itens e n fotos (fotos com bytes reais)."""
    def _make(items=0, photos=0, notes=(), **overrides):
        data = {
            'id': 'rel-1',
            'title': 'Inspeção de Casa de Máquinas',
            'report_number': '2024-015',
            'date': datetime(2024, 3, 15, 9, 0, 0),
            'status': ReportStatus.DRAFT,
        }
        data['items'] = [
            ChecklistItem(
                id=f'item-{i}',
                description=f'Verificar componente {i + 1}',
                completed=(i % 2 == 0),
                note=f'Observação do item {i + 1}' if i in notes else None,
                report_id='rel-1',
            )
            for i in range(items)
        ]
        data['photos'] = [
            Photo(id=f'foto-{i}', name=f'foto_{i + 1}.png', image_data=png_bytes(), report_id='rel-1')
            for i in range(photos)
        ]
        data.update(overrides)
        return ReportDocument(**data)
    return _make


@pytest.fixture
def service(test_config):
    return PDFService(test_config, session=FakeSession({}))


@pytest.fixture
def make_context(test_config):
    """
    Contexto de renderização sobre um canvas descartável, com a primeira
    página já aberta. Retorna (ctx, cursor).
    """
    def _make(report):
        fonts = FontManager(config=test_config)
        assembler = DocumentAssembler(test_config, report, fonts.FONT_REGULAR, fonts.FONT_BOLD, GENERATED_AT)
        ctx = assembler.build_context(Canvas(io.BytesIO(), pagesize=A4, invariant=1))
        return ctx, open_page(ctx, 1)
    return _make


class FakeResponse:
    def __init__(self, status_code=200, content=b'', chunk_size=None):
        self.status_code = status_code
        self.content = content
        self.chunk_size = chunk_size

    def __enter__(self):
        return self

    def __exit__(self, *exc):
        return False

    def raise_for_status(self):
        if self.status_code >= 400:
            raise requests.HTTPError(f"{self.status_code} Error")

    def iter_content(self, chunk_size=1):
        size = self.chunk_size or chunk_size
        for start in range(0, len(self.content), size):
            yield self.content[start:start + size]


class FakeSession:
    """
    Substitui requests.Session: responde a partir de um dicionário url ->
    FakeResponse (ou exceção) e mede quantas buscas rodaram ao mesmo tempo.
    """

    def __init__(self, responses, delay=0.0):
        self.responses = responses
        self.delay = delay
        self.calls = []
        self.active = 0
        self.max_active = 0
        self._lock = threading.Lock()

    def get(self, url, timeout=None, stream=False):
        with self._lock:
            self.calls.append(url)
            self.active += 1
            self.max_active = max(self.max_active, self.active)
        try:
            if self.delay:
                time.sleep(self.delay)
            response = self.responses.get(url)
            if response is None:
                raise requests.ConnectionError(f"sem rota para {url}")
            if isinstance(response, Exception):
                raise response
            return response
        finally:
            with self._lock:
                self.active -= 1


@pytest.fixture
def fake_session():
    return FakeSession


@pytest.fixture
def generated_at():
    return GENERATED_AT


@pytest.fixture
def fake_response():
    return FakeResponse
