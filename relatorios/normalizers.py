# relatorios/normalizers.py
import base64
import binascii
import json
import re
from datetime import datetime, timezone
from typing import Any, Dict, List, Optional, Tuple

from dateutil import parser as date_parser

STATUS_ALIASES = {
    'RASCUNHO': 'RASCUNHO',
    'PENDENTE': 'RASCUNHO',
    'DRAFT': 'RASCUNHO',
    'FINALIZADO': 'FINALIZADO',
    'FINAL': 'FINALIZADO',
    'CONCLUIDO': 'FINALIZADO',
}

TRUE_TOKENS = {'1', 'true', 'sim', 's', 'yes', 'y', 'on', 'x'}


def _pick_first(d: Dict[str, Any], keys: List[str], default=None):
    for k in keys:
        if k in d and d[k] is not None:
            return d[k]
    return default


def _safe_str(x: Any) -> str:
    if x is None:
        return ''
    return str(x)


def _to_bool(value: Any) -> bool:
    if isinstance(value, bool):
        return value
    if isinstance(value, (int, float)):
        return value != 0
    return _safe_str(value).strip().lower() in TRUE_TOKENS


def _to_int(value: Any) -> Optional[int]:
    if value is None or value == '':
        return None
    try:
        return int(value)
    except (TypeError, ValueError):
        return None


def _try_parse_datetime(value: Any) -> Optional[datetime]:
    """
    Tenta interpretar várias formas de date/datetime e retorna datetime ou None.
    """
    if value is None:
        return None
    if isinstance(value, datetime):
        return value
    v = _safe_str(value).strip()
    if not v:
        return None

    # timestamps numéricos (10 ou 13 dígitos)
    if re.fullmatch(r'\d{10}|\d{13}', v):
        ts = int(v) / 1000.0 if len(v) == 13 else int(v)
        return datetime.fromtimestamp(ts, tz=timezone.utc)

    # ISO primeiro (yyyy-mm-dd não deve ser lido como dia-primeiro)
    try:
        return datetime.fromisoformat(v.replace('Z', '+00:00'))
    except ValueError:
        pass

    try:
        return date_parser.parse(v, dayfirst=True)
    except (ValueError, OverflowError):
        pass

    m = re.search(r'(\d{2}/\d{2}/\d{4})', v)
    if m:
        return datetime.strptime(m.group(1), "%d/%m/%Y")
    return None


def _decode_image(value: Any) -> Optional[bytes]:
    """Aceita bytes, base64 puro ou data URL (data:image/png;base64,...)."""
    if value is None:
        return None
    if isinstance(value, (bytes, bytearray)):
        return bytes(value) or None
    s = _safe_str(value).strip()
    if not s:
        return None
    if s.startswith('data:'):
        _, _, s = s.partition(',')
    try:
        return base64.b64decode(s, validate=False) or None
    except (binascii.Error, ValueError):
        return None


def normalize_status(raw: Any) -> str:
    key = _safe_str(raw).strip().upper()
    return STATUS_ALIASES.get(key, 'RASCUNHO')


def normalize_item(raw: Dict[str, Any]) -> Dict[str, Any]:
    return {
        'id': _pick_first(raw, ['id', 'ID']),
        'description': _pick_first(raw, ['description', 'descricao', 'DESCRICAO'], ''),
        'completed': _to_bool(_pick_first(raw, ['completed', 'concluido', 'CONCLUIDO'], False)),
        'note': _pick_first(raw, ['note', 'observacao', 'OBSERVACAO']),
        'order': _to_int(_pick_first(raw, ['order', 'ordem', 'ORDEM'])),
        'report_id': _pick_first(raw, ['report_id', 'relatorioId', 'relatorio_id']),
    }


def normalize_photo(raw: Dict[str, Any]) -> Dict[str, Any]:
    data = _pick_first(raw, ['image_data', 'data', 'base64', 'b64', 'conteudo'])
    return {
        'id': _pick_first(raw, ['id', 'ID']),
        'name': _pick_first(raw, ['name', 'nome', 'filename', 'originalFileName'], ''),
        'url': _pick_first(raw, ['url', 'URL']),
        'image_data': _decode_image(data),
        'order': _to_int(_pick_first(raw, ['order', 'ordem', 'ORDEM'])),
        'report_id': _pick_first(raw, ['report_id', 'relatorioId', 'relatorio_id']),
    }


def _as_list(raw: Any) -> List[Any]:
    if raw is None:
        return []
    if isinstance(raw, (bytes, bytearray)):
        raw = raw.decode('utf-8')
    if isinstance(raw, str):
        try:
            raw = json.loads(raw)
        except ValueError:
            return []
    if isinstance(raw, (list, tuple)):
        return list(raw)
    return []


def normalize_payload(payload: Dict[str, Any]) -> Dict[str, Any]:
    """
    Converte o payload recebido (chaves em inglês, ou os nomes originais em
    português/camelCase) para os campos de ReportDocument.
    A validação de obrigatoriedade fica com o modelo pydantic.
    """
    if not isinstance(payload, dict):
        return payload

    mapping = {
        'id': ['id', 'report_id', 'relatorioId'],
        'title': ['title', 'titulo', 'TITULO'],
        'report_number': ['report_number', 'numeroRelatorio', 'numero_relatorio', 'numero'],
        'report_type': ['report_type', 'tipoRelatorio', 'tipo_relatorio'],
        'description': ['description', 'descricao', 'DESCRICAO'],
        'general_notes': ['general_notes', 'observacoesGerais', 'observacoes_gerais'],
        'conclusion': ['conclusion', 'conclusao', 'CONCLUSAO'],
        'recommendations': ['recommendations', 'recomendacoes', 'RECOMENDACOES'],
    }

    normalized: Dict[str, Any] = {}
    for dst, keys in mapping.items():
        val = _pick_first(payload, keys)
        if val is not None:
            normalized[dst] = val

    raw_date = _pick_first(payload, ['date', 'data', 'DATA', 'created_at', 'createdAt'])
    parsed_dt = _try_parse_datetime(raw_date)
    # sem data válida o modelo acusa o campo obrigatório
    normalized['date'] = parsed_dt if parsed_dt is not None else raw_date

    normalized['status'] = normalize_status(_pick_first(payload, ['status', 'STATUS']))

    items_raw = _as_list(_pick_first(payload, ['items', 'itens', 'ITENS']))
    normalized['items'] = [normalize_item(i) for i in items_raw if isinstance(i, dict)]

    photos_raw = _as_list(_pick_first(payload, ['photos', 'fotos', 'FOTOS', 'images']))
    normalized['photos'] = [normalize_photo(p) for p in photos_raw if isinstance(p, dict)]

    return normalized


def merge_uploads(normalized: Dict[str, Any], uploads: List[Tuple[str, bytes]]) -> Dict[str, Any]:
    """
    Associa arquivos enviados (multipart) às fotos, na ordem: cada arquivo
    preenche a próxima foto ainda sem bytes e sem URL; arquivos que sobram
    viram fotos novas com o nome do arquivo.
    """
    photos = list(normalized.get('photos') or [])
    pending = iter([p for p in photos if not p.get('image_data') and not p.get('url')])
    for filename, data in uploads:
        if not data:
            continue
        target = next(pending, None)
        if target is None:
            photos.append({'name': filename or '', 'image_data': data})
            continue
        target['image_data'] = data
        if not target.get('name'):
            target['name'] = filename or ''
    normalized['photos'] = photos
    return normalized
