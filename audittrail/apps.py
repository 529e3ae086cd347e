from django.apps import AppConfig


class AudittrailConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "audittrail"
