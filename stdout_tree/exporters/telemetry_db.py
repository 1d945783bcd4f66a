"""
telemetry_db.py

Reads spans from a SQLite telemetry DB (an `otel_spans` table with
microsecond timestamps and JSON attributes/events) as SpanRecords.
"""

import json
import logging
import os
import sqlite3
from typing import List, Optional, Tuple

from opentelemetry.trace import StatusCode

from ..model import INVALID_SPAN_ID, SpanEvent, SpanRecord

logger = logging.getLogger(__name__)

NS_PER_US = 1_000


def find_databases(base_dir: str) -> List[Tuple[str, str]]:
    """List (service, path) for every <base_dir>/<service>/telemetry.db."""
    if not os.path.isdir(base_dir):
        return []
    services = sorted(
        d for d in os.listdir(base_dir)
        if os.path.isdir(os.path.join(base_dir, d))
    )
    dbs = []
    for service in services:
        db_path = os.path.join(base_dir, service, "telemetry.db")
        if os.path.isfile(db_path):
            dbs.append((service, db_path))
    return dbs


def _load_json(raw, default):
    try:
        value = json.loads(raw) if raw else default
    except ValueError:
        logger.debug("Ignoring malformed JSON column %r", raw)
        return default
    return value if isinstance(value, type(default)) else default


def _events(raw) -> List[SpanEvent]:
    events = []
    for item in _load_json(raw, []):
        if not isinstance(item, dict) or "name" not in item:
            continue
        try:
            timestamp = int(item.get("timestamp", 0))
        except (TypeError, ValueError):
            logger.debug("Ignoring event %r with malformed timestamp", item["name"])
            continue
        attributes = item.get("attributes")
        events.append(
            SpanEvent(
                name=str(item["name"]),
                timestamp=timestamp * NS_PER_US,
                attributes=attributes if isinstance(attributes, dict) else {},
            )
        )
    return events


def load_spans(db_path: str, trace_id: Optional[str] = None) -> List[SpanRecord]:
    """Load spans ordered by start time, for one trace or for all of them."""
    conn = sqlite3.connect(db_path)
    try:
        cur = conn.cursor()
        query = """
            SELECT trace_id, span_id, parent_span_id, name, start_time, end_time,
                   attributes, status_code, events
              FROM otel_spans
        """
        params: tuple = ()
        if trace_id is not None:
            query += " WHERE trace_id = ?"
            params = (trace_id,)
        cur.execute(query + " ORDER BY start_time", params)
        rows = cur.fetchall()
    finally:
        conn.close()

    spans = []
    for tid, span_id, parent_id, name, start_us, end_us, attrs_json, status, events_json in rows:
        spans.append(
            SpanRecord(
                trace_id=tid,
                span_id=span_id,
                parent_span_id=parent_id if parent_id else INVALID_SPAN_ID,
                name=name,
                start_time=start_us * NS_PER_US,
                end_time=end_us * NS_PER_US,
                attributes=_load_json(attrs_json, {}),
                status_code=StatusCode.ERROR if status else StatusCode.UNSET,
                events=_events(events_json),
            )
        )
    return spans
