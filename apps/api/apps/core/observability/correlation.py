"""
Per-request correlation context.

Every request gets an ``X-Request-ID`` (taken from the caller or generated).
The id and the authenticated user are kept in thread-local storage so that
CorrelationFilter can stamp them on each log record emitted while the request
is being served.
"""
import logging
import time
import uuid
from threading import local

from django.utils.deprecation import MiddlewareMixin

logger = logging.getLogger(__name__)

_context = local()
_CONTEXT_FIELDS = ('request_id', 'user_id', 'user_role')


def get_request_id():
    return getattr(_context, 'request_id', None)


def get_user_id():
    return getattr(_context, 'user_id', None)


def get_user_role():
    return getattr(_context, 'user_role', None)


def bind_user(user):
    """
    Record the authenticated user for the rest of the request.

    Called from the JWT authentication class, since DRF resolves token users
    after the middleware has run.
    """
    if user is None or not user.is_authenticated:
        return
    _context.user_id = str(user.pk)
    _context.user_role = getattr(user, 'role', None)


def clear_request_context():
    for field in _CONTEXT_FIELDS:
        if hasattr(_context, field):
            delattr(_context, field)


class RequestCorrelationMiddleware(MiddlewareMixin):
    """Assigns the request id, records HTTP metrics and logs one line per request."""

    header = 'HTTP_X_REQUEST_ID'

    def process_request(self, request):
        clear_request_context()
        request.request_id = request.META.get(self.header) or str(uuid.uuid4())
        request.start_time = time.monotonic()
        _context.request_id = request.request_id
        bind_user(getattr(request, 'user', None))

    def process_response(self, request, response):
        request_id = getattr(request, 'request_id', None)
        if request_id:
            response['X-Request-ID'] = request_id

        started = getattr(request, 'start_time', None)
        if started is not None:
            elapsed = time.monotonic() - started
            self._observe(request, response.status_code, elapsed)
            logger.info(
                '%s %s -> %s',
                request.method,
                request.path,
                response.status_code,
                extra={
                    'event': 'http_request_completed',
                    'path': request.path,
                    'method': request.method,
                    'status_code': response.status_code,
                    'duration_ms': round(elapsed * 1000, 2),
                    'request_id': request_id,
                    'user_id': get_user_id(),
                    'user_role': get_user_role(),
                }
            )

        clear_request_context()
        return response

    def process_exception(self, request, exception):
        from .metrics import metrics

        exception_type = type(exception).__name__
        metrics.exceptions_total.labels(exception_type=exception_type, location='http').inc()
        logger.exception(
            'Unhandled %s on %s %s',
            exception_type,
            request.method,
            request.path,
            extra={
                'event': 'http_request_exception',
                'exception_type': exception_type,
                'request_id': getattr(request, 'request_id', None),
                'user_id': get_user_id(),
            }
        )

    @staticmethod
    def _observe(request, status_code, elapsed):
        from .metrics import metrics

        # URL names keep the label set bounded (no ids or codes from the path)
        match = getattr(request, 'resolver_match', None)
        route = match.view_name if match is not None and match.view_name else 'unresolved'
        metrics.http_requests_total.labels(
            route=route,
            method=request.method,
            status=str(status_code),
        ).inc()
        metrics.http_request_duration_seconds.labels(route=route, method=request.method).observe(elapsed)
