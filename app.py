import logging
import os
import sys
import traceback
from logging.handlers import RotatingFileHandler

from flask import Flask, got_request_exception, request

from relatorios.config import Config
from relatorios.routes import init_routes

LOG_FORMAT = '%(asctime)s - %(name)s - %(levelname)s - %(message)s'


def setup_logging(log_path=None):
    """Configura o logger do pacote 'relatorios' (arquivo rotativo + console)."""
    logger = logging.getLogger('relatorios')
    logger.setLevel(logging.INFO)

    # Evita adicionar handlers duplicados em múltiplas chamadas
    if not logger.handlers:
        log_path = log_path or Config.LOG_PATH
        file_handler = RotatingFileHandler(log_path, maxBytes=10_000_000, backupCount=5, encoding='utf-8')
        file_handler.setFormatter(logging.Formatter(LOG_FORMAT))
        stream_handler = logging.StreamHandler()
        stream_handler.setFormatter(logging.Formatter('%(asctime)s - %(levelname)s - %(message)s'))
        logger.addHandler(file_handler)
        logger.addHandler(stream_handler)

    return logger


def create_app(config_object=Config):
    app = Flask(__name__)

    # Carrega configuração
    app.config.from_object(config_object)

    logger = setup_logging(getattr(config_object, 'LOG_PATH', None))

    init_routes(app, logger, config_object)

    # Log completo das exceções não tratadas por requisição
    def _log_request_exception(sender, exception, **extra):
        rid = request.headers.get('X-Request-ID', '') or ''
        logger.error("Unhandled exception (rid=%s): %s", rid, traceback.format_exc())
        sys.stderr.flush()

    got_request_exception.connect(_log_request_exception, app)

    return app


if __name__ == '__main__':
    # Apenas para execução local; em produção o gunicorn usa wsgi:app
    app = create_app()
    port = int(os.environ.get('PORT', 5000))
    if sys.platform.startswith('win'):
        # Gunicorn não roda no Windows; waitress vem no extra "serve"
        from waitress import serve
        serve(app, host='0.0.0.0', port=port)
    else:
        app.run(host='0.0.0.0', port=port, debug=Config.DEBUG)
