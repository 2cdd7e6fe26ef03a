"""
Helpers turning domain errors into API responses.
"""
from django.core.exceptions import ValidationError
from rest_framework import status
from rest_framework.response import Response


def error_message(exc):
    """Plain text of a ValidationError (``str()`` would give the list repr)."""
    if isinstance(exc, ValidationError):
        return ' '.join(exc.messages)
    return str(exc)


def error_response(exc, http_status=status.HTTP_400_BAD_REQUEST, **extra):
    payload = {'error': error_message(exc) if isinstance(exc, Exception) else str(exc)}
    payload.update(extra)
    return Response(payload, status=http_status)


def forbidden(message='You do not have access to this resource.'):
    return Response({'error': message}, status=status.HTTP_403_FORBIDDEN)


def not_found(message='Not found.'):
    return Response({'error': message}, status=status.HTTP_404_NOT_FOUND)
