"""
Prometheus metrics registry.
"""
import time
from functools import wraps

from prometheus_client import Counter, Histogram


class MetricsRegistry:
    """
    Central metrics registry for ShelfUp.

    Provides typed access to all application metrics.
    """

    def __init__(self):
        self._setup_metrics()

    def _setup_metrics(self):
        # ===================================================================
        # HTTP Metrics
        # ===================================================================
        self.http_requests_total = Counter(
            'shelfup_http_requests_total',
            'Total HTTP requests',
            ['route', 'method', 'status']
        )

        self.http_request_duration_seconds = Histogram(
            'shelfup_http_request_duration_seconds',
            'HTTP request duration in seconds',
            ['route', 'method'],
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5, 1.0, 2.5, 5.0, 10.0]
        )

        self.exceptions_total = Counter(
            'shelfup_exceptions_total',
            'Total exceptions',
            ['exception_type', 'location']
        )

        # ===================================================================
        # Contract Metrics
        # ===================================================================
        self.contract_transitions_total = Counter(
            'shelfup_contract_transitions_total',
            'Distributor contract transitions',
            ['action', 'result']
        )

        self.contract_completions_total = Counter(
            'shelfup_contract_completions_total',
            'Completed cancellations (records removed)',
            ['distributor_type', 'result']
        )

        # ===================================================================
        # QR / Selection Metrics
        # ===================================================================
        self.qr_codes_total = Counter(
            'shelfup_qr_codes_total',
            'QR code lifecycle events',
            ['action', 'result']
        )

        self.qr_image_render_duration_seconds = Histogram(
            'shelfup_qr_image_render_duration_seconds',
            'Duration of QR code PNG rendering',
            buckets=[0.005, 0.01, 0.025, 0.05, 0.1, 0.25, 0.5]
        )

        self.product_selection_total = Counter(
            'shelfup_product_selection_total',
            'Product selection changes',
            ['scope', 'action', 'result']  # scope: distributor|qr_code
        )

        # ===================================================================
        # Commerce Metrics
        # ===================================================================
        self.orders_placed_total = Counter(
            'shelfup_orders_placed_total',
            'Storefront orders placed',
            ['result']
        )

        self.order_status_updates_total = Counter(
            'shelfup_order_status_updates_total',
            'Order status updates by manufacturers',
            ['to_status']
        )

        self.settlements_processed_total = Counter(
            'shelfup_settlements_processed_total',
            'Settlements processed by admins',
            ['result']
        )

    def track_duration(self, histogram_metric):
        """
        Decorator to track function duration.

        Usage:
            @metrics.track_duration(metrics.qr_image_render_duration_seconds)
            def render_qr_png(payload):
                ...
        """
        def decorator(func):
            @wraps(func)
            def wrapper(*args, **kwargs):
                start_time = time.time()
                try:
                    return func(*args, **kwargs)
                finally:
                    histogram_metric.observe(time.time() - start_time)
            return wrapper
        return decorator


# Global metrics instance
metrics = MetricsRegistry()
