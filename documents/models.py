# documents/models.py
import uuid

from django.db import models


class Fund(models.Model):
    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    name = models.CharField(max_length=200)
    code = models.CharField(max_length=32, unique=True)
    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        ordering = ("name",)

    def __str__(self) -> str:
        return f"{self.name} ({self.code})"


class Document(models.Model):
    class DocumentType(models.TextChoices):
        PROSPECTUS = "PROSPECTUS", "Prospectus"
        ANNUAL_REPORT = "ANNUAL_REPORT", "Annual report"
        AUDIT_REPORT = "AUDIT_REPORT", "Audit report"
        KYC = "KYC", "KYC"
        OTHER = "OTHER", "Other"

    class Status(models.TextChoices):
        PENDING = "PENDING", "Pending"
        APPROVED = "APPROVED", "Approved"
        REJECTED = "REJECTED", "Rejected"

    id = models.UUIDField(primary_key=True, default=uuid.uuid4, editable=False)
    fund = models.ForeignKey(
        Fund,
        related_name="documents",
        on_delete=models.PROTECT,
    )
    title = models.CharField(max_length=255)
    type = models.CharField(
        max_length=32,
        choices=DocumentType.choices,
        default=DocumentType.OTHER,
    )
    status = models.CharField(
        max_length=16,
        choices=Status.choices,
        default=Status.PENDING,
        db_index=True,
    )
    period_start = models.DateTimeField()
    period_end = models.DateTimeField()
    description = models.TextField(blank=True, null=True)
    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ("-created_at",)
        indexes = [
            models.Index(fields=["fund", "status"]),
        ]

    def __str__(self) -> str:
        return f"Document {self.title} ({self.status})"

    @property
    def fund_label(self) -> str:
        if self.fund_id and self.fund:
            return f"{self.fund.name} ({self.fund.code})"
        return str(self.fund_id)
