"""
Observability tests: correlation IDs, PII redaction, domain events and
the health/metrics endpoints.
"""
import json
import logging

import pytest
from django.http import HttpResponse
from django.test import RequestFactory

from apps.core.observability import correlation, log_domain_event, metrics
from apps.core.observability.logging import (
    CorrelationFilter,
    SanitizedJSONFormatter,
    sanitize_dict,
)


def make_record(message='Checkout done', **extra):
    record = logging.LogRecord('shelfup.test', logging.INFO, __file__, 1, message, None, None)
    for key, value in extra.items():
        setattr(record, key, value)
    return record


class ListHandler(logging.Handler):

    def __init__(self):
        super().__init__()
        self.records = []

    def emit(self, record):
        self.records.append(record)


@pytest.fixture
def event_records():
    """Records of the domain event logger (the ``apps`` logger does not propagate)."""
    handler = ListHandler()
    event_logger = logging.getLogger('apps.core.observability.events')
    event_logger.addHandler(handler)
    yield handler.records
    event_logger.removeHandler(handler)


class TestCorrelationMiddleware:

    def setup_method(self):
        self.factory = RequestFactory()
        self.middleware = correlation.RequestCorrelationMiddleware(lambda request: HttpResponse('ok'))

    def test_request_id_is_generated(self):
        response = self.middleware(self.factory.get('/healthz'))

        assert len(response['X-Request-ID']) == 36
        assert correlation.get_request_id() is None

    def test_incoming_request_id_is_propagated(self):
        request = self.factory.get('/healthz', HTTP_X_REQUEST_ID='req-123')

        response = self.middleware(request)

        assert response['X-Request-ID'] == 'req-123'

    def test_context_visible_during_request(self):
        seen = {}

        def view(request):
            seen['request_id'] = correlation.get_request_id()
            return HttpResponse('ok')

        middleware = correlation.RequestCorrelationMiddleware(view)
        middleware(self.factory.get('/', HTTP_X_REQUEST_ID='abc'))

        assert seen['request_id'] == 'abc'


class TestRedaction:

    def test_sanitize_dict(self):
        data = {
            'order_number': 'ORD-1',
            'email': 'hana@test.com',
            'shipping': {'shipping_address': '1-1 Marunouchi', 'items': 2},
            'lines': [{'Phone': '090'}],
        }

        sanitized = sanitize_dict(data)

        assert sanitized['order_number'] == 'ORD-1'
        assert sanitized['email'] == '[REDACTED]'
        assert sanitized['shipping'] == {'shipping_address': '[REDACTED]', 'items': 2}
        assert sanitized['lines'] == [{'Phone': '[REDACTED]'}]
        assert data['email'] == 'hana@test.com'

    def test_json_formatter_redacts_extra_fields(self):
        record = make_record(
            order_number='ORD-1',
            head_office_code='12345678',
            payload={'password': 'secret-value'},
        )
        CorrelationFilter().filter(record)

        output = json.loads(SanitizedJSONFormatter().format(record))

        assert output['message'] == 'Checkout done'
        assert output['level'] == 'INFO'
        assert output['order_number'] == 'ORD-1'
        assert output['head_office_code'] == '[REDACTED]'
        assert output['payload'] == {'password': '[REDACTED]'}
        assert output['request_id'] == '-'

    def test_domain_event(self, event_records):
        log_domain_event(
            'qr_code.generated',
            entity_type='QRCode',
            entity_id='7',
            entity_ids={'distributor_id': '3'},
            email='hana@test.com',
        )

        record = event_records[-1]
        assert record.event == 'qr_code.generated'
        assert record.result == 'success'
        assert record.distributor_id == '3'
        assert record.email == '[REDACTED]'

    def test_blocked_event_is_a_warning(self, event_records):
        log_domain_event('product_selection.quota_exceeded', result='blocked')

        assert event_records[-1].levelno == logging.WARNING


class TestMetrics:

    def test_registry_exposes_domain_counters(self):
        for name in (
            'http_requests_total',
            'contract_transitions_total',
            'qr_codes_total',
            'product_selection_total',
            'orders_placed_total',
            'settlements_processed_total',
        ):
            assert hasattr(metrics, name)


@pytest.mark.django_db
class TestHealthEndpoints:

    def test_healthz(self, client):
        response = client.get('/healthz')

        assert response.status_code == 200
        assert response.json()['status'] == 'ok'
        assert response.json()['service'] == 'shelfup-api'
        assert 'X-Request-ID' in response

    def test_readyz(self, client):
        response = client.get('/readyz')

        assert response.status_code == 200
        assert response.json()['checks'] == {'database': True, 'storage': True}

    def test_metrics(self, client):
        client.get('/healthz')

        response = client.get('/metrics')

        assert response.status_code == 200
        assert b'http_requests_total' in response.content
