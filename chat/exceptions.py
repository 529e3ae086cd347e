from rest_framework import status
from rest_framework.exceptions import APIException


class AssistantNotConfigured(APIException):
    status_code = status.HTTP_401_UNAUTHORIZED
    default_detail = "Assistant API key is not configured on the server"
    default_code = "assistant_not_configured"


class AssistantUnavailable(APIException):
    status_code = status.HTTP_503_SERVICE_UNAVAILABLE
    default_detail = "Failed to get a response from the AI assistant. Please try again later."
    default_code = "assistant_unavailable"
