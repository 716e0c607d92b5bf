# accounting/models/period.py

"""
======================================================
PATH: accounting/models/period.py
======================================================
ACCOUNTING PERIOD MODEL

A calendar date range that gates posting.

Guarantees:
- Periods never overlap
- Periods are never deleted (entries may reference their range)
- Lifecycle: open -> closed (close), closed -> open (reopen)

A period does not own journal entries; it is consulted at post time.
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import F, Q


class AccountingPeriod(models.Model):
    class Status(models.TextChoices):
        OPEN = "open", "Open"
        CLOSED = "closed", "Closed"

    name = models.CharField(max_length=100)

    start_date = models.DateField()
    end_date = models.DateField()

    status = models.CharField(
        max_length=10,
        choices=Status.choices,
        default=Status.OPEN,
    )

    closed_at = models.DateTimeField(null=True, blank=True)
    closed_by = models.CharField(
        max_length=150,
        blank=True,
        default="",
        help_text="Identifier of the actor that closed the period.",
    )

    notes = models.TextField(blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["-start_date"]
        indexes = [
            models.Index(fields=["start_date", "end_date"], name="idx_period_range"),
            models.Index(fields=["status"], name="idx_period_status"),
        ]
        constraints = [
            models.UniqueConstraint(
                fields=["start_date"],
                name="uniq_accounting_period_start",
            ),
            models.CheckConstraint(
                condition=Q(end_date__gte=F("start_date")),
                name="chk_accounting_period_end_gte_start",
            ),
        ]
        verbose_name = "Accounting Period"
        verbose_name_plural = "Accounting Periods"

    def __str__(self):
        return f"{self.name} ({self.start_date} → {self.end_date}, {self.status})"

    @property
    def is_closed(self) -> bool:
        return self.status == self.Status.CLOSED

    def contains(self, day) -> bool:
        return self.start_date <= day <= self.end_date

    def clean(self):
        self.name = (self.name or "").strip()
        if not self.name:
            raise ValidationError({"name": "Period name is required"})

        if self.start_date and self.end_date and self.end_date < self.start_date:
            raise ValidationError({"end_date": "end_date must be >= start_date"})

        if self.start_date and self.end_date:
            qs = AccountingPeriod.objects.filter(
                start_date__lte=self.end_date,
                end_date__gte=self.start_date,
            )
            if self.pk:
                qs = qs.exclude(pk=self.pk)

            if qs.exists():
                raise ValidationError(
                    {
                        "start_date": "This period overlaps an existing accounting period.",
                        "end_date": "This period overlaps an existing accounting period.",
                    }
                )

        if self.status == self.Status.CLOSED and self.closed_at is None:
            raise ValidationError({"closed_at": "Closed periods must record closed_at"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Accounting periods cannot be deleted")
