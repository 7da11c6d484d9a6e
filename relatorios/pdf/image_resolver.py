# relatorios/pdf/image_resolver.py
import logging
from concurrent.futures import ThreadPoolExecutor
from typing import List, Optional
from urllib.parse import urlparse

import requests

from relatorios.models import Photo

from .image_manager import is_image_bytes

logger = logging.getLogger(__name__)


class PhotoResolver:
    """
    Busca, em paralelo e com limite de concorrência, os bytes das fotos que
    chegaram só com URL. Toda busca termina antes do layout começar; falhas
    viram foto sem dados (placeholder no PDF) e nunca abortam a geração.
    """

    def __init__(self, config, session=None):
        self.MAX_WORKERS = max(1, int(getattr(config, 'PHOTO_FETCH_MAX_WORKERS', 4)))
        self.TIMEOUT = float(getattr(config, 'PHOTO_FETCH_TIMEOUT', 20))
        self.MAX_BYTES = int(getattr(config, 'PHOTO_MAX_BYTES', 10 * 1024 * 1024))
        self.ALLOWED_SCHEMES = tuple(getattr(config, 'PHOTO_ALLOWED_SCHEMES', ('http', 'https')))
        # sem sessão injetada cada busca usa requests.get, sem Session entre threads
        self.http = session if session is not None else requests

    def _allowed(self, url: str) -> bool:
        scheme = urlparse(url).scheme.lower()
        return scheme in self.ALLOWED_SCHEMES

    def fetch(self, url: str) -> Optional[bytes]:
        """Baixa uma URL respeitando timeout e tamanho máximo. None em qualquer falha."""
        if not url or not self._allowed(url):
            logger.warning("URL de foto recusada: %r", url)
            return None

        try:
            with self.http.get(url, timeout=self.TIMEOUT, stream=True) as resp:
                resp.raise_for_status()
                chunks = []
                total = 0
                for chunk in resp.iter_content(chunk_size=64 * 1024):
                    if not chunk:
                        continue
                    total += len(chunk)
                    if total > self.MAX_BYTES:
                        logger.warning("Foto %s excede %d bytes; ignorada", url, self.MAX_BYTES)
                        return None
                    chunks.append(chunk)
        except requests.RequestException as e:
            logger.warning("Falha ao baixar foto %s: %s", url, e)
            return None

        data = b''.join(chunks)
        if not is_image_bytes(data):
            logger.warning("Conteúdo de %s não é uma imagem reconhecida", url)
            return None
        return data

    def _resolve_one(self, photo: Photo) -> Photo:
        if photo.image_data or not photo.url:
            return photo
        return photo.model_copy(update={'image_data': self.fetch(photo.url)})

    def resolve(self, photos: List[Photo]) -> List[Photo]:
        """Devolve as fotos na mesma ordem, com image_data preenchido quando possível."""
        pending = [p for p in photos if not p.image_data and p.url]
        if not pending:
            return list(photos)

        workers = min(self.MAX_WORKERS, len(pending))
        logger.info("Baixando %d fotos (%d em paralelo)", len(pending), workers)
        with ThreadPoolExecutor(max_workers=workers) as executor:
            # map preserva a ordem de entrada; o with aguarda todas as buscas
            resolved = list(executor.map(self._resolve_one, photos))
        return resolved
