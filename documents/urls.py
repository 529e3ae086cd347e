from django.urls import path, include
from rest_framework.routers import DefaultRouter

from .views import DocumentViewSet, FundViewSet

app_name = "documents"

router = DefaultRouter()
router.register(r"funds", FundViewSet, basename="fund")
router.register(r"documents", DocumentViewSet, basename="document")

urlpatterns = [
    path("", include(router.urls)),
]
