# accounting/models/journal_line.py

"""
======================================================
PATH: accounting/models/journal_line.py
======================================================
JOURNAL LINE MODEL

One debit OR credit posting to a single account.

Guarantees:
- Immutable once created
- debit >= 0, credit >= 0, exactly one of them non-zero
- Owned by its JournalEntry (removed only together with it)
- Reporting uses journal_entry.entry_date as the accounting timeline
"""

from __future__ import annotations

from decimal import Decimal

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q

from accounting.models.account import Account
from accounting.models.journal import JournalEntry


class JournalLine(models.Model):
    journal_entry = models.ForeignKey(
        JournalEntry,
        on_delete=models.CASCADE,
        related_name="lines",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="journal_lines",
    )

    debit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))
    credit = models.DecimalField(max_digits=18, decimal_places=2, default=Decimal("0.00"))

    description = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)

    class Meta:
        verbose_name = "Journal Line"
        verbose_name_plural = "Journal Lines"
        ordering = ["id"]
        indexes = [
            models.Index(fields=["account"], name="idx_journal_line_account"),
            models.Index(fields=["journal_entry"], name="idx_journal_line_entry"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=Q(debit__gte=0) & Q(credit__gte=0),
                name="chk_journal_line_non_negative",
            ),
            models.CheckConstraint(
                condition=(Q(debit__gt=0) & Q(credit=0)) | (Q(debit=0) & Q(credit__gt=0)),
                name="chk_journal_line_one_side",
            ),
        ]

    def __str__(self):
        if self.debit:
            return f"DR {self.debit} → {self.account}"
        return f"CR {self.credit} → {self.account}"

    @property
    def side(self) -> str:
        return "debit" if self.debit > 0 else "credit"

    @property
    def amount(self) -> Decimal:
        return self.debit if self.debit > 0 else self.credit

    def clean(self):
        debit = self.debit or Decimal("0.00")
        credit = self.credit or Decimal("0.00")

        if debit < 0 or credit < 0:
            raise ValidationError("Debit or credit cannot be negative")
        if debit > 0 and credit > 0:
            raise ValidationError("A journal line cannot have both debit and credit")
        if debit == 0 and credit == 0:
            raise ValidationError("A journal line must have either debit or credit")

    def save(self, *args, **kwargs):
        if self.pk:
            raise ValidationError("JournalLine records are immutable and cannot be modified")

        self.full_clean()
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("JournalLine records are removed only together with their entry")
