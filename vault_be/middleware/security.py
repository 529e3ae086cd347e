"""
Request hardening middleware.
"""
import logging

from django.conf import settings
from django.http import JsonResponse

logger = logging.getLogger(__name__)

WRITE_METHODS = ("POST", "PUT", "PATCH")


class RequestSizeLimitMiddleware:
    """
    Reject write requests whose declared body is larger than MAX_REQUEST_BYTES.

    Chat payloads are small JSON documents, so the limit is well below
    Django's upload defaults.
    """

    def __init__(self, get_response):
        self.get_response = get_response
        self.max_size = int(getattr(settings, "MAX_REQUEST_BYTES", 1024 * 1024))

    def __call__(self, request):
        if request.method in WRITE_METHODS:
            content_length = self._content_length(request)
            if content_length is not None and content_length > self.max_size:
                logger.warning(
                    "Request size limit exceeded: %s bytes from IP %s on %s",
                    content_length,
                    request.META.get("REMOTE_ADDR"),
                    request.path,
                )
                return JsonResponse(
                    {
                        "error": "Request too large",
                        "max_size_bytes": self.max_size,
                        "your_size_bytes": content_length,
                    },
                    status=413,
                )

        return self.get_response(request)

    @staticmethod
    def _content_length(request):
        raw = request.META.get("CONTENT_LENGTH")
        if not raw:
            return None
        try:
            return int(raw)
        except (TypeError, ValueError):
            # malformed header, let Django deal with the body
            return None
