"""
Structured business event logging.

Each event is a single log line whose ``event`` field names what happened
(``qr_code.generated``, ``contract.transition``, ``order.placed``...). The
level follows the result: failures are errors, refusals are warnings.
"""
import logging
from typing import Dict, Optional

from .logging import get_sanitized_logger, sanitize_dict

logger = get_sanitized_logger(__name__)

_RESULT_LEVELS = {
    'failure': logging.ERROR,
    'error': logging.ERROR,
    'warning': logging.WARNING,
    'blocked': logging.WARNING,
    'throttled': logging.WARNING,
}


def log_domain_event(
    event_name: str,
    entity_type: Optional[str] = None,
    entity_id: Optional[str] = None,
    entity_ids: Optional[Dict[str, str]] = None,
    result: str = 'success',
    **extra_fields
):
    """
    Log a business event.

    Args:
        event_name: Dotted event name, e.g. 'contract.cancellation_requested'
        entity_type: Model the event is about ('Distributor', 'QRCode', ...)
        entity_id: Primary key of that entity
        entity_ids: Related ids, flattened into the record
        result: success, failure, blocked... (selects the level)
        **extra_fields: Additional context, redacted before logging
    """
    fields = {'event': event_name, 'result': result}
    if entity_type:
        fields['entity_type'] = entity_type
    if entity_id:
        fields['entity_id'] = entity_id
    fields.update(entity_ids or {})
    fields.update(sanitize_dict(extra_fields))

    logger.log(_RESULT_LEVELS.get(result, logging.INFO), 'Domain event: %s', event_name, extra=fields)


def log_contract_transition(distributor, from_status, to_status, result='success', **extra):
    log_domain_event(
        'contract.transition',
        entity_type='Distributor',
        entity_id=str(distributor.id),
        entity_ids={'company_id': str(distributor.company_id)},
        result=result,
        from_status=from_status,
        to_status=to_status,
        shelf_return_status=distributor.shelf_return_status,
        **extra
    )


def log_quota_rejected(scope, owner_id, product_id, limit):
    """A product selection refused because the location's quota is used up."""
    log_domain_event(
        'product_selection.quota_exceeded',
        entity_type=scope,
        entity_id=str(owner_id),
        entity_ids={'product_id': str(product_id)},
        result='blocked',
        limit=limit,
    )
