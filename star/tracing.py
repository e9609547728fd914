import threading
import time
from dataclasses import dataclass
from typing import Optional

from .constants import HEADER_REQUEST_ID

# Chave única no environ WSGI; acessar sempre via get_request_context()
_ENVIRON_KEY = "star.request_context"
_WSGI_REQUEST_ID = "HTTP_" + HEADER_REQUEST_ID.upper().replace("-", "_")


@dataclass(frozen=True)
class RequestContext:
    request_id: str


class RequestIdGenerator:
    """Gera ids a partir de time.time_ns(), estritamente crescentes no processo."""

    def __init__(self, clock=time.time_ns):
        self._clock = clock
        self._lock = threading.Lock()
        self._last = 0

    def __call__(self) -> str:
        with self._lock:
            value = self._clock()
            if value <= self._last:
                value = self._last + 1
            self._last = value
        return str(value)


def get_request_context(environ) -> Optional[RequestContext]:
    ctx = environ.get(_ENVIRON_KEY)
    if isinstance(ctx, RequestContext):
        return ctx
    return None


def attach_request_context(environ, ctx: RequestContext) -> None:
    environ[_ENVIRON_KEY] = ctx


class TracingMiddleware:
    def __init__(self, app, id_generator=None):
        self.app = app
        self.new_request_id = id_generator or RequestIdGenerator()

    def __call__(self, environ, start_response):
        request_id = environ.get(_WSGI_REQUEST_ID) or self.new_request_id()
        attach_request_context(environ, RequestContext(request_id=request_id))

        def _start_response(status, headers, exc_info=None):
            headers = [(k, v) for k, v in headers if k.lower() != HEADER_REQUEST_ID.lower()]
            headers.append((HEADER_REQUEST_ID, request_id))
            return start_response(status, headers, exc_info)

        return self.app(environ, _start_response)
