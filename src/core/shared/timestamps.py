"""
Normalização de timestamps.

Documentos antigos podem ter datas gravadas como string ISO-8601,
enquanto os novos usam o tipo temporal nativo do store. Tudo que
entra no domínio passa por ``to_datetime`` e vira um ``datetime``
com timezone UTC.
"""

import logging
import re
from datetime import datetime, date, time, timezone
from typing import Any, Optional

logger = logging.getLogger(__name__)

# fromisoformat (3.10) só aceita frações com 3 ou 6 dígitos
_FRACTION = re.compile(r"\.(\d+)")


def utc_now() -> datetime:
    """Retorna o instante atual em UTC (timezone-aware)."""
    return datetime.now(timezone.utc)


def to_datetime(value: Any) -> Optional[datetime]:
    """
    Converte valor persistido em ``datetime`` UTC.

    Aceita:
    - ``datetime`` (naive é tratado como UTC)
    - ``date`` (meia-noite UTC)
    - string ISO-8601, com ou sem sufixo ``Z``
    - número (epoch em segundos)

    Args:
        value: Valor lido do store

    Returns:
        datetime timezone-aware em UTC, ou None se vazio/ilegível

    Example:
        >>> to_datetime("2024-03-01T10:00:00Z").isoformat()
        '2024-03-01T10:00:00+00:00'
    """
    if value is None or value == "":
        return None

    if isinstance(value, datetime):
        if value.tzinfo is None:
            return value.replace(tzinfo=timezone.utc)
        return value.astimezone(timezone.utc)

    if isinstance(value, date):
        return datetime.combine(value, time.min, tzinfo=timezone.utc)

    if isinstance(value, bool):
        return None

    if isinstance(value, (int, float)):
        return datetime.fromtimestamp(value, tz=timezone.utc)

    if isinstance(value, str):
        text = value.strip()
        if text.endswith("Z"):
            text = text[:-1] + "+00:00"
        text = _FRACTION.sub(lambda m: "." + m.group(1)[:6].ljust(6, "0"), text, count=1)
        try:
            parsed = datetime.fromisoformat(text)
        except ValueError:
            if text:
                logger.warning(f"Timestamp ilegível descartado: {value!r}")
            return None
        return to_datetime(parsed)

    return None


def hours_between(start: Optional[datetime], end: Optional[datetime]) -> Optional[float]:
    """Diferença em horas entre dois instantes, ou None se faltar algum."""
    if start is None or end is None:
        return None
    return (end - start).total_seconds() / 3600
