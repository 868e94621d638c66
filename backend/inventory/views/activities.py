"""Activity log related API views."""

from rest_framework import viewsets
from rest_framework.permissions import IsAuthenticated

from ..models import Activity
from ..permissions import is_super_admin
from ..serializers import ActivitySerializer


class ActivityViewSet(viewsets.ReadOnlyModelViewSet):
    """Read-only access to the activity log.

    Super admins see every entry; everyone else sees their own.
    """

    serializer_class = ActivitySerializer
    permission_classes = [IsAuthenticated]
    pagination_class = None

    def get_queryset(self):
        queryset = Activity.objects.select_related('user', 'content_type')
        if not is_super_admin(self.request.user):
            queryset = queryset.filter(user=self.request.user)
        date_str = self.request.query_params.get('date')
        if date_str:
            queryset = queryset.filter(timestamp__date=date_str)
        return queryset.order_by('-timestamp', '-id')
