"""
Example programs producing traces to look at.

- `readme`: an HTTP request passing through middlewares, a database
  query and a downstream GraphQL call that records an exception
- `fibonacci`: recursive calls with debug events
"""

import time

from opentelemetry.trace import SpanKind, Status, StatusCode, Tracer


def readme(tracer: Tracer, sleep=time.sleep) -> None:
    with tracer.start_as_current_span(
        "request",
        kind=SpanKind.SERVER,
        attributes={
            "http.method": "GET",
            "http.flavor": "1.1",
            "http.target": "/authors/6d50807b-80e6-4802-b01e-3e78137a0fc9/books/d13d226c-c600-42c9-bb9d-96395c5e9351",
            "http.host": "my-awesome-books.com:443",
            "http.server_name": "my-awesome-books.com",
            "net.host.port": 443,
            "http.scheme": "https",
            "http.route": "/authors/:authorId/books/:bookId",
            "http.status_code": 500,
            "http.client_ip": "192.0.2.4",
            "net.peer.ip": "192.0.2.5",
            "http.user_agent": "Mozilla/5.0 (Windows NT 10.0; Win64; x64; rv:72.0) Gecko/20100101 Firefox/72.0",
        },
    ):
        with tracer.start_as_current_span("middleware - expressInit"):
            pass
        with tracer.start_as_current_span("middleware - query"):
            pass
        with tracer.start_as_current_span("middleware - session"):
            with tracer.start_as_current_span("pg-pool.connect", kind=SpanKind.CLIENT):
                sleep(0.3)
            with tracer.start_as_current_span(
                "get session",
                kind=SpanKind.CLIENT,
                attributes={
                    "db.system": "postgresql",
                    "db.connection_string": "postgresql://user@localhost/sessions",
                    "db.user": "user",
                    "net.peer.name": "localhost",
                    "net.peer.ip": "127.0.0.1",
                    "net.peer.port": 5432,
                    "net.transport": "IP.TCP",
                    "db.name": "sessions",
                    "db.statement": 'SELECT sess FROM "session" WHERE sid = $1 AND expire >= to_timestamp($2)',
                },
            ):
                sleep(0.2)
        with tracer.start_as_current_span("middleware - initialize"):
            pass
        with tracer.start_as_current_span("middleware - authenticate") as span:
            span.add_event("user authenticated", {"enduser.id": "42"})
        with tracer.start_as_current_span("request handler - /authors/:authorId/books/:bookId"):
            with tracer.start_as_current_span(
                "get book",
                kind=SpanKind.CLIENT,
                attributes={
                    "http.method": "POST",
                    "http.flavor": "1.1",
                    "http.url": "http://book-service.book-service/graphql",
                    "net.peer.ip": "192.0.2.5",
                    "http.status_code": 200,
                },
            ):
                sleep(0.005)
                _graphql_request(tracer)
                sleep(0.021)


def _graphql_request(tracer: Tracer) -> None:
    with tracer.start_as_current_span(
        "request",
        kind=SpanKind.SERVER,
        attributes={
            "http.method": "POST",
            "http.flavor": "1.1",
            "http.target": "/graphql",
            "http.host": "book-service.book-service:443",
            "http.server_name": "book-service.book.service",
            "net.host.port": 80,
            "http.scheme": "http",
            "http.route": "/graphql",
            "http.status_code": 200,
            "http.client_ip": "192.0.2.4",
            "net.peer.ip": "192.0.2.5",
        },
    ):
        with tracer.start_as_current_span("query"):
            with tracer.start_as_current_span(
                "field", record_exception=False, set_status_on_exception=False
            ) as span:
                span.record_exception(RuntimeError("something went wrong"))
                span.set_status(Status(StatusCode.ERROR))
        with tracer.start_as_current_span("parse"):
            pass
        with tracer.start_as_current_span("validation"):
            pass


def _nth_fibonacci(tracer: Tracer, n: int, debug: bool) -> int:
    with tracer.start_as_current_span("nth_fibonacci", attributes={"arg1": str(n)}) as span:
        if n in (0, 1):
            if debug:
                span.add_event("Base case")
            return 1
        if debug:
            span.add_event("Recursing")
        return _nth_fibonacci(tracer, n - 1, debug) + _nth_fibonacci(tracer, n - 2, debug)


def fibonacci(tracer: Tracer, n: int = 5, debug: bool = False) -> list:
    with tracer.start_as_current_span("root") as root:
        with tracer.start_as_current_span("fibonacci_seq", attributes={"arg1": str(n)}) as span:
            sequence = []
            for i in range(n + 1):
                if debug:
                    span.add_event(f"Pushing {i} fibonacci")
                sequence.append(_nth_fibonacci(tracer, i, debug))
        root.add_event(f"The first {n} fibonacci numbers are {sequence}")
    return sequence
