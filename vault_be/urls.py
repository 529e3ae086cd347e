from django.http import JsonResponse
from django.urls import path, include


def health(request):
    return JsonResponse({"status": "ok"}, status=200)


urlpatterns = [
    path("health/", health, name="health"),
    path("chat/", include("chat.urls")),
    path("", include("documents.urls")),
    path("", include("django_prometheus.urls")),
]
