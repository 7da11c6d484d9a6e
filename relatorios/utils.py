import re
from datetime import date, datetime
from typing import Optional

from dateutil import parser as date_parser
from dateutil import tz


def format_date_br(raw) -> str:
    if not raw:
        return ''
    if isinstance(raw, (datetime, date)):
        return raw.strftime('%d/%m/%Y')
    raw = str(raw).strip()
    # yyyy-mm-dd nunca é lido como dia-primeiro
    if len(raw) >= 10 and raw[4] == "-" and raw[7] == "-":
        try:
            y, m, day = raw[:10].split("-")
            return f"{int(day):02d}/{int(m):02d}/{int(y):04d}"
        except ValueError:
            pass
    try:
        d = date_parser.parse(raw, dayfirst=True, fuzzy=True)
        return d.strftime("%d/%m/%Y")
    except (ValueError, OverflowError):
        return raw


def localize(dt: datetime, timezone_name: Optional[str]) -> datetime:
    """Converte dt para o fuso configurado; datetimes ingênuos são tratados como UTC."""
    zone = tz.gettz(timezone_name) if timezone_name else None
    if zone is None:
        return dt
    if dt.tzinfo is None:
        dt = dt.replace(tzinfo=tz.UTC)
    return dt.astimezone(zone)


def format_generated_at(dt: datetime, timezone_name: Optional[str] = None) -> str:
    local = localize(dt, timezone_name)
    return f"{local.strftime('%d/%m/%Y')} às {local.strftime('%H:%M:%S')}"


def safe_filename(title: str) -> str:
    # tudo que não for [a-zA-Z0-9] vira '_'
    base = re.sub(r'[^a-zA-Z0-9]', '_', str(title or '')) or 'relatorio'
    return f"relatorio-{base}.pdf"
