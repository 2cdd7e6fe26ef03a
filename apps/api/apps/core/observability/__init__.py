"""
ShelfUp observability: request correlation, redacted JSON logs, business
events, Prometheus metrics and health endpoints.
"""
from .events import log_domain_event
from .logging import get_sanitized_logger
from .metrics import metrics

__all__ = ['get_sanitized_logger', 'log_domain_event', 'metrics']
