"""
Derive what to show for a span from its semantic-convention attributes.

Matchers are tried in order and the first one that recognizes the span wins:
HTTP, then database, then a generic fallback listing all attributes.
"""

import math
import re
from typing import Callable, NamedTuple, Optional
from urllib.parse import urlsplit

from opentelemetry.trace import StatusCode

from .model import SpanRecord

HTTP_METHOD = "http.method"
HTTP_URL = "http.url"
HTTP_SERVER_NAME = "http.server_name"
HTTP_HOST = "http.host"
HTTP_ROUTE = "http.route"
HTTP_TARGET = "http.target"
HTTP_STATUS_CODE = "http.status_code"

DB_SYSTEM = "db.system"
DB_NAME = "db.name"
DB_STATEMENT = "db.statement"
DB_OPERATION = "db.operation"

EXCEPTION_TYPE = "exception.type"
EXCEPTION_MESSAGE = "exception.message"


class SemanticInfo(NamedTuple):
    name: str
    details: str
    is_error: bool
    status: int


def format_value(value) -> str:
    """Render an attribute value the way it reads in `key=value` details."""
    if isinstance(value, bool):
        return "true" if value else "false"
    if isinstance(value, (list, tuple)):
        return "[" + ",".join(format_value(v) for v in value) + "]"
    return str(value)


class _MalformedUrl(Exception):
    pass


def _parse_url(raw):
    try:
        url = urlsplit(str(raw))
        # .port validates the port number
        url.port
    except ValueError as exc:
        raise _MalformedUrl(raw) from exc
    if not url.scheme:
        raise _MalformedUrl(raw)
    return url


_DECIMAL = re.compile(r"[+-]?[0-9]+")


def _parse_status_code(value) -> Optional[int]:
    if isinstance(value, bool):
        return None
    if isinstance(value, int):
        return value
    if isinstance(value, float):
        return int(value) if math.isfinite(value) else None
    if isinstance(value, str) and _DECIMAL.fullmatch(value):
        return int(value)
    return None


def _span_status(span: SpanRecord) -> int:
    return span.status_code.value


def http_info(span: SpanRecord) -> Optional[SemanticInfo]:
    attrs = span.attributes
    method = attrs.get(HTTP_METHOD)
    if method is None:
        return None

    url = None
    if HTTP_URL in attrs:
        try:
            url = _parse_url(attrs[HTTP_URL])
        except _MalformedUrl:
            return None

    if url is not None:
        name = url.hostname or ""
    elif HTTP_SERVER_NAME in attrs:
        name = format_value(attrs[HTTP_SERVER_NAME])
    elif HTTP_HOST in attrs:
        name = format_value(attrs[HTTP_HOST])
    else:
        name = span.name

    if url is not None:
        path = url.path or ("/" if url.netloc else "")
    elif HTTP_ROUTE in attrs:
        path = format_value(attrs[HTTP_ROUTE])
    elif HTTP_TARGET in attrs:
        path = format_value(attrs[HTTP_TARGET])
    else:
        path = ""

    status_code = _parse_status_code(attrs.get(HTTP_STATUS_CODE))
    if status_code is not None:
        is_error = status_code >= 400
    else:
        is_error = span.status_code == StatusCode.ERROR

    return SemanticInfo(
        name=name,
        details=f"{format_value(method)} {path}",
        is_error=is_error,
        status=status_code if status_code is not None else 0,
    )


def db_info(span: SpanRecord) -> Optional[SemanticInfo]:
    attrs = span.attributes
    if DB_SYSTEM not in attrs:
        return None

    name = format_value(attrs[DB_NAME]) if DB_NAME in attrs else span.name
    if DB_STATEMENT in attrs:
        details = format_value(attrs[DB_STATEMENT])
    elif DB_OPERATION in attrs:
        details = format_value(attrs[DB_OPERATION])
    else:
        details = ""

    return SemanticInfo(
        name=name,
        details=details,
        is_error=span.status_code == StatusCode.ERROR,
        status=_span_status(span),
    )


def default_info(span: SpanRecord) -> SemanticInfo:
    details = " ".join(f"{key}={format_value(value)}" for key, value in span.attributes.items())
    return SemanticInfo(
        name=span.name,
        details=details,
        is_error=span.status_code == StatusCode.ERROR,
        status=_span_status(span),
    )


MATCHERS: list[Callable[[SpanRecord], Optional[SemanticInfo]]] = [http_info, db_info]


def extract(span: SpanRecord) -> SemanticInfo:
    for matcher in MATCHERS:
        info = matcher(span)
        if info is not None:
            return info
    return default_info(span)
