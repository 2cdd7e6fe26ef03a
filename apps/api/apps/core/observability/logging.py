"""
Log record enrichment and PII redaction.

Shipping details, contact data, credentials and head office join codes must
never reach the log sink in clear text. Every ``extra={...}`` field whose name
is listed in SENSITIVE_FIELDS is replaced by ``[REDACTED]``, also inside
nested dicts and lists.
"""
import json
import logging
from datetime import datetime, timezone

from .correlation import get_request_id, get_user_id, get_user_role

REDACTED = '[REDACTED]'

SENSITIVE_FIELDS = frozenset({
    # credentials
    'password', 'password_confirm', 'token', 'access', 'refresh', 'secret', 'api_key',
    # payments and chain membership
    'payment_intent_id', 'head_office_code',
    # personal data
    'first_name', 'last_name', 'email', 'phone', 'address', 'headquarters_address',
    'shipping_name', 'shipping_address', 'shipping_phone',
})

# Standard LogRecord attributes, everything else on a record came from ``extra``
_RECORD_ATTRS = frozenset(vars(logging.LogRecord('', 0, '', 0, '', None, None))) | {'message', 'asctime'}


def _is_sensitive(key):
    return str(key).lower() in SENSITIVE_FIELDS


def _redact(value):
    if isinstance(value, dict):
        return sanitize_dict(value)
    if isinstance(value, (list, tuple)):
        return [_redact(item) for item in value]
    return value


def sanitize_dict(data):
    """Copy of ``data`` with sensitive keys redacted at any depth."""
    if not isinstance(data, dict):
        return data
    return {
        key: REDACTED if _is_sensitive(key) else _redact(value)
        for key, value in data.items()
    }


class CorrelationFilter(logging.Filter):
    """Stamps request id and user on records that do not carry them already."""

    def filter(self, record):
        for field, getter in (
            ('request_id', get_request_id),
            ('user_id', get_user_id),
            ('user_role', get_user_role),
        ):
            if not getattr(record, field, None):
                setattr(record, field, getter() or '-')
        return True


class SanitizedJSONFormatter(logging.Formatter):
    """One JSON object per line, extras included after redaction."""

    def format(self, record):
        entry = {
            'timestamp': datetime.fromtimestamp(record.created, timezone.utc).isoformat().replace('+00:00', 'Z'),
            'level': record.levelname,
            'logger': record.name,
            'message': record.getMessage(),
            'request_id': getattr(record, 'request_id', '-'),
            'user_id': getattr(record, 'user_id', '-'),
            'user_role': getattr(record, 'user_role', '-'),
        }
        for key, value in vars(record).items():
            if key in entry or key in _RECORD_ATTRS or key.startswith('_'):
                continue
            entry[key] = REDACTED if _is_sensitive(key) else _redact(value)

        if record.exc_info:
            entry['exception'] = self.formatException(record.exc_info)
        return json.dumps(entry, default=str)


def get_sanitized_logger(name):
    """``logging.getLogger`` with the CorrelationFilter attached once."""
    logger = logging.getLogger(name)
    if not any(isinstance(f, CorrelationFilter) for f in logger.filters):
        logger.addFilter(CorrelationFilter())
    return logger
