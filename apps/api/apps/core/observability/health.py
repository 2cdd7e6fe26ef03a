"""
Liveness, readiness and Prometheus endpoints.

- GET /healthz - process is up (no dependency checks)
- GET /readyz  - database reachable and QR image storage writable
- GET /metrics - Prometheus text exposition
"""
import logging

from django.conf import settings
from django.core.files.storage import default_storage
from django.db import DatabaseError, connection
from django.http import HttpResponse, JsonResponse
from django.views import View
from prometheus_client import CONTENT_TYPE_LATEST, generate_latest

logger = logging.getLogger(__name__)


class HealthzView(View):

    def get(self, request):
        payload = {
            'status': 'ok',
            'service': 'shelfup-api',
            'version': settings.VERSION,
        }
        if settings.COMMIT_HASH:
            payload['commit'] = settings.COMMIT_HASH
        return JsonResponse(payload)


class ReadyzView(View):
    """Answers 503 while any dependency check fails."""

    def get(self, request):
        checks = {
            'database': self._database_ok(),
            'storage': self._storage_ok(),
        }
        ready = all(checks.values())
        return JsonResponse(
            {'status': 'ready' if ready else 'not_ready', 'checks': checks},
            status=200 if ready else 503,
        )

    @staticmethod
    def _database_ok():
        try:
            with connection.cursor() as cursor:
                cursor.execute('SELECT 1')
        except DatabaseError as e:
            logger.error(
                'Readiness check failed',
                extra={'event': 'readiness_failed', 'check': 'database', 'error': str(e)},
            )
            return False
        return True

    @staticmethod
    def _storage_ok():
        # The QR directory is created lazily on first save
        try:
            default_storage.listdir('')
        except FileNotFoundError:
            return True
        except OSError as e:
            logger.error(
                'Readiness check failed',
                extra={'event': 'readiness_failed', 'check': 'storage', 'error': str(e)},
            )
            return False
        return True


class MetricsView(View):

    def get(self, request):
        return HttpResponse(generate_latest(), content_type=CONTENT_TYPE_LATEST)
