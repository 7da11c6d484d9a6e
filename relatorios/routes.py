# relatorios/routes.py
import io
import json
import logging
from functools import wraps

from flask import jsonify, request, send_file
from pydantic import ValidationError

from relatorios.config import Config
from relatorios.exceptions import FontResourceError, IntegrityViolationError, RelatorioPDFError
from relatorios.models import ReportDocument
from relatorios.normalizers import merge_uploads, normalize_payload
from relatorios.pdf.pdf_service import PDFService

logger = logging.getLogger(__name__)

TRUE_ARGS = {'1', 'true', 'sim', 'yes'}


def _validation_details(e):
    return [
        {'campo': '.'.join(str(p) for p in err.get('loc', ())), 'msg': err.get('msg', '')}
        for err in e.errors()
    ]


def handle_errors(logger):
    def decorator(f):
        @wraps(f)
        def decorated(*args, **kwargs):
            try:
                return f(*args, **kwargs)
            except ValidationError as e:
                logger.warning("Validation error: %s", e)
                return jsonify({'error': 'Dados do relatório inválidos', 'detalhes': _validation_details(e)}), 400
            except IntegrityViolationError as e:
                logger.error("Integridade violada (relatório %s): itens=%s fotos=%s",
                             e.report_id, e.item_ids, e.photo_ids)
                return jsonify({'error': 'Dados inconsistentes detectados', 'msg': str(e)}), 409
            except FontResourceError as e:
                logger.error("Fontes indisponíveis: %s", e)
                return jsonify({'error': 'Recursos de fonte indisponíveis', 'msg': str(e)}), 500
            except RelatorioPDFError as e:
                logger.error("Falha na geração do PDF: %s", e)
                return jsonify({'error': 'Erro ao gerar PDF', 'msg': str(e)}), 500
            except Exception as e:
                logger.exception("Unexpected error")
                return jsonify({'error': 'Erro interno do servidor', 'msg': str(e)}), 500
        return decorated
    return decorator


def _read_request_payload():
    """
    Aceita:
     - application/json com o relatório completo, ou
     - multipart/form-data com o campo 'payload' (JSON string) e os arquivos
       de foto em 'fotos'.
    Retorna (payload, uploads) onde uploads é a lista de (nome, bytes).
    """
    uploads = []
    payload = None

    content_type = (request.content_type or '').lower()
    if 'multipart/form-data' in content_type:
        raw_payload = request.form.get('payload')
        if raw_payload:
            try:
                payload = json.loads(raw_payload)
            except ValueError:
                logger.warning("Campo 'payload' não é um JSON válido")
                payload = None
        for storage in request.files.getlist('fotos'):
            uploads.append((storage.filename or '', storage.read()))
    else:
        payload = request.get_json(silent=True)

    return payload, uploads


def init_routes(app, logger, config=Config):
    pdf_service = PDFService(config)
    app.extensions['pdf_service'] = pdf_service

    @app.route('/')
    def index():
        return "Serviço de Relatórios (PDF)"

    @app.route('/health')
    def health():
        return jsonify({'status': 'ok'})

    @app.route('/relatorios/pdf', methods=['POST'])
    @handle_errors(logger)
    def gerar_pdf():
        payload, uploads = _read_request_payload()
        if not isinstance(payload, dict) or not payload:
            return jsonify({'error': 'Payload JSON inválido ou ausente'}), 400

        normalized = merge_uploads(normalize_payload(payload), uploads)
        report = ReportDocument.model_validate(normalized)
        logger.info("Gerando PDF do relatório %s (%d itens, %d fotos)",
                    report.id or report.title, len(report.items), len(report.photos))

        result = pdf_service.render(report)
        filename = pdf_service.get_filename(report)
        as_attachment = request.args.get('download', '').strip().lower() in TRUE_ARGS

        resp = send_file(io.BytesIO(result.pdf), mimetype='application/pdf',
                         as_attachment=as_attachment, download_name=filename)
        resp.headers['Cache-Control'] = 'no-cache'
        resp.headers['X-Page-Count'] = str(result.page_count)
        if report.id:
            resp.headers['X-Report-Id'] = report.id
        return resp

    # fim init_routes
