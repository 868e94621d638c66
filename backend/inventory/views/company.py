"""Views for managing the invoice letterhead."""

from rest_framework import viewsets
from rest_framework.parsers import FormParser, JSONParser, MultiPartParser
from rest_framework.permissions import IsAuthenticated
from rest_framework.response import Response

from ..models import CompanyInfo
from ..permissions import IsAdminOrSuperAdmin
from ..serializers import CompanyInfoSerializer


class CompanyInfoViewSet(viewsets.GenericViewSet):
    """Viewset for viewing and editing the singleton CompanyInfo instance."""

    permission_classes = [IsAuthenticated]
    parser_classes = [JSONParser, MultiPartParser, FormParser]
    serializer_class = CompanyInfoSerializer

    def get_permissions(self):
        if self.action == 'create':
            return [IsAuthenticated(), IsAdminOrSuperAdmin()]
        return super().get_permissions()

    def list(self, request, *args, **kwargs):
        """Get the company info instance."""
        instance = CompanyInfo.load()
        serializer = self.get_serializer(instance)
        return Response(serializer.data)

    def create(self, request, *args, **kwargs):
        """Update the company info instance using POST."""
        instance = CompanyInfo.load()
        serializer = self.get_serializer(instance, data=request.data, partial=True)
        serializer.is_valid(raise_exception=True)
        serializer.save()
        return Response(serializer.data)
