"""Common utility views for general API endpoints."""

import logging

from django.db import DatabaseError, connection
from django.utils import timezone
from rest_framework import status
from rest_framework.decorators import api_view, permission_classes
from rest_framework.permissions import AllowAny
from rest_framework.response import Response

logger = logging.getLogger(__name__)


@api_view(['GET'])
@permission_classes([AllowAny])
def health_check(request):
    """Report whether the API and its database are reachable."""

    try:
        with connection.cursor() as cursor:
            cursor.execute('SELECT 1')
            cursor.fetchone()
    except DatabaseError:
        logger.exception('Health check could not reach the database')
        return Response(
            {'status': 'ERROR', 'database': 'disconnected', 'timestamp': timezone.now()},
            status=status.HTTP_503_SERVICE_UNAVAILABLE,
        )
    return Response({'status': 'OK', 'database': 'connected', 'timestamp': timezone.now()})
