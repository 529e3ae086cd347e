# documents/views.py
from django.db.models import Count, Q
from rest_framework import viewsets
from rest_framework.decorators import action
from rest_framework.response import Response

from .models import Document, Fund
from .serializers import DocumentSerializer, FundSerializer

UUID_LOOKUP = r"[0-9a-fA-F-]{36}"


class FundViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /funds/
    GET /funds/<id>/
    """
    queryset = Fund.objects.all().order_by("name")
    serializer_class = FundSerializer
    lookup_value_regex = UUID_LOOKUP
    filterset_fields = ["code"]


class DocumentViewSet(viewsets.ReadOnlyModelViewSet):
    """
    GET /documents/
    GET /documents/?fund=<uuid>&status=PENDING&type=KYC
    GET /documents/<id>/
    GET /documents/summary/
    """
    queryset = Document.objects.select_related("fund").order_by("-created_at")
    serializer_class = DocumentSerializer
    lookup_value_regex = UUID_LOOKUP
    filterset_fields = ["fund", "status", "type"]

    @action(detail=False, methods=["get"])
    def summary(self, request):
        """Status counts shown on the dashboard and the chat sidebar."""
        qs = self.filter_queryset(self.get_queryset())
        counts = qs.aggregate(
            totalDocs=Count("id"),
            pending=Count("id", filter=Q(status=Document.Status.PENDING)),
            approved=Count("id", filter=Q(status=Document.Status.APPROVED)),
            rejected=Count("id", filter=Q(status=Document.Status.REJECTED)),
        )
        return Response(counts)
