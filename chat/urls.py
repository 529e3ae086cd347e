from django.urls import path
from . import views

app_name = "chat"

urlpatterns = [
    # Sessions
    path("sessions", views.sessions, name="sessions"),
    path("sessions/", views.sessions),

    # Session detail
    path("sessions/<str:sid>", views.session_detail, name="session_detail"),
    path("sessions/<str:sid>/", views.session_detail),

    # Send
    path("send", views.send, name="send"),
    path("send/", views.send),
]
