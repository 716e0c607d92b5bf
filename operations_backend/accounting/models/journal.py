# accounting/models/journal.py

"""
======================================================
PATH: accounting/models/journal.py
======================================================
JOURNAL ENTRY MODEL

Represents a single accounting transaction (journal header).

Guarantees:
- Immutable once created (no updates)
- total_debit == total_credit
- Idempotency via (event_type, event_context, reference_type, reference_id)
  uniqueness whenever reference_id is provided
- entry_date is the accounting effective date (used for period locks and reports)
- Deletion (lines cascade) only while the entry date is outside any closed period
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q

from accounting.models.mapping import EventType


class JournalEntry(models.Model):
    entry_date = models.DateField(help_text="Accounting effective date")

    description = models.TextField(help_text="Narrative description of the journal entry")

    event_type = models.CharField(max_length=40, choices=EventType.choices)
    event_context = models.CharField(max_length=40, blank=True, default="")

    reference_type = models.CharField(
        max_length=50,
        blank=True,
        default="",
        help_text="Kind of originating business object (purchase, sales_order, payment, stock_count, ...)",
    )
    reference_id = models.CharField(
        max_length=100,
        blank=True,
        default="",
        help_text="Opaque id of the originating business object",
    )

    total_debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    total_credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))

    posted_by = models.CharField(max_length=150, blank=True, default="")

    created_at = models.DateTimeField(
        auto_now_add=True,
        help_text="Timestamp when the journal entry was created",
    )

    class Meta:
        ordering = ["-entry_date", "-created_at"]
        indexes = [
            models.Index(fields=["entry_date"], name="idx_journal_entry_date"),
            models.Index(fields=["created_at"], name="idx_journal_created_at"),
            models.Index(fields=["event_type"], name="idx_journal_event_type"),
            models.Index(fields=["reference_type", "reference_id"], name="idx_journal_reference"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["event_type", "event_context", "reference_type", "reference_id"],
                condition=~Q(reference_id=""),
                name="uniq_journal_event_reference",
            ),
            models.CheckConstraint(
                condition=Q(total_debit=F("total_credit")),
                name="chk_journal_balanced",
            ),
        ]
        verbose_name = "Journal Entry"
        verbose_name_plural = "Journal Entries"

    def __str__(self):
        return f"JournalEntry #{self.id} – {self.entry_date}"

    @property
    def idempotency_key(self) -> tuple[str, str, str, str]:
        return (self.event_type, self.event_context, self.reference_type, self.reference_id)

    def clean(self):
        self.reference_type = (self.reference_type or "").strip()
        self.reference_id = (self.reference_id or "").strip()
        self.event_context = (self.event_context or "").strip().lower()

        self.description = (self.description or "").strip()
        if not self.description:
            raise ValidationError("Journal entry description is required")

        if self.reference_id and not self.reference_type:
            raise ValidationError("reference_type is required when reference_id is set")

        if self.total_debit != self.total_credit:
            raise ValidationError(
                f"Journal entry not balanced: debits={self.total_debit} credits={self.total_credit}"
            )

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalEntry records are immutable once created")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        from accounting.models.period import AccountingPeriod

        closed = AccountingPeriod.objects.filter(
            status=AccountingPeriod.Status.CLOSED,
            start_date__lte=self.entry_date,
            end_date__gte=self.entry_date,
        ).exists()
        if closed:
            raise ValidationError(
                "JournalEntry falls inside a closed period and cannot be deleted"
            )
        return super().delete(*args, **kwargs)
