import time

import structlog
from werkzeug.wrappers import Request

from .constants import HEADER_FORWARDED_FOR, HEADER_REAL_IP, UNKNOWN
from .tracing import get_request_context
from .utils import get_hostname, latency_ms, pick_first_nonempty

logger = structlog.get_logger(__name__)


def resolve_client_ip(headers, remote_addr):
    # X-Real-Ip -> X-Forwarded-For -> endereço da conexão
    return pick_first_nonempty(
        headers.get(HEADER_REAL_IP),
        headers.get(HEADER_FORWARDED_FOR),
        remote_addr,
    ) or ""


class AccessLogMiddleware:
    """Registra um log estruturado por request, depois que o app downstream responde.

    Deve ficar dentro do TracingMiddleware para enxergar o request id.
    """

    def __init__(self, app, clock=time.perf_counter_ns, hostname_resolver=get_hostname):
        self.app = app
        self.clock = clock
        self.hostname_resolver = hostname_resolver

    def __call__(self, environ, start_response):
        ctx = get_request_context(environ)
        request_id = ctx.request_id if ctx is not None else UNKNOWN
        hostname = self._hostname()

        start = self.clock()
        response = self.app(environ, start_response)
        latency = latency_ms(self.clock() - start)

        request = Request(environ, populate_request=False, shallow=True)
        logger.info(
            "Request",
            hostname=hostname,
            request_id=request_id,
            latency=latency,
            client_ip=resolve_client_ip(request.headers, request.remote_addr),
            method=request.method,
            path=request.path,
            header={k: request.headers.getlist(k) for k in request.headers.keys()},
            referer=request.referrer or "",
            user_agent=request.user_agent.string,
        )
        return response

    def _hostname(self):
        try:
            return self.hostname_resolver() or UNKNOWN
        except Exception:
            # Falha ao resolver hostname nunca derruba a request
            return UNKNOWN
