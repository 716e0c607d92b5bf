# accounting/models/account.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models
from django.db.models import Q


class Account(models.Model):
    """
    Represents a single account in the Chart of Accounts.

    Guarantees:
    - Account codes are globally unique and human-sortable
    - Code + name are normalized (trimmed)
    - Hierarchy is a parent link (nodes addressed by id, no nesting)
    - account_type cannot change once journal lines reference the account
    """

    ASSET = "ASSET"
    LIABILITY = "LIABILITY"
    EQUITY = "EQUITY"
    REVENUE = "REVENUE"
    EXPENSE = "EXPENSE"

    ACCOUNT_TYPES = [
        (ASSET, "Asset"),
        (LIABILITY, "Liability"),
        (EQUITY, "Equity"),
        (REVENUE, "Revenue"),
        (EXPENSE, "Expense"),
    ]

    # Natural (normal) balance side per type
    DEBIT_NORMAL_TYPES = (ASSET, EXPENSE)

    code = models.CharField(max_length=20, unique=True)
    name = models.CharField(max_length=150)

    account_type = models.CharField(
        max_length=20,
        choices=ACCOUNT_TYPES,
    )

    parent = models.ForeignKey(
        "self",
        on_delete=models.PROTECT,
        null=True,
        blank=True,
        related_name="children",
        help_text="Optional rollup parent (same account type).",
    )

    is_active = models.BooleanField(default=True)

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["code"]
        verbose_name = "Account"
        verbose_name_plural = "Accounts"
        indexes = [
            models.Index(fields=["account_type"], name="idx_account_type"),
            models.Index(fields=["is_active"], name="idx_account_active"),
        ]
        constraints = [
            models.CheckConstraint(
                condition=~Q(code=""),
                name="chk_account_code_not_blank",
            ),
            models.CheckConstraint(
                condition=~Q(name=""),
                name="chk_account_name_not_blank",
            ),
        ]

    def __str__(self):
        return f"{self.code} – {self.name}"

    @property
    def is_debit_normal(self) -> bool:
        return self.account_type in self.DEBIT_NORMAL_TYPES

    def clean(self):
        self.code = (self.code or "").strip()
        self.name = (self.name or "").strip()

        if not self.code:
            raise ValidationError("Account code is required")
        if not self.name:
            raise ValidationError("Account name is required")

        if self.parent_id:
            if self.pk and self.parent_id == self.pk:
                raise ValidationError({"parent": "An account cannot be its own parent"})

            # Walk up the chain to refuse cycles
            seen = {self.pk} if self.pk else set()
            node = self.parent
            while node is not None:
                if node.pk in seen:
                    raise ValidationError({"parent": "Account hierarchy cannot contain cycles"})
                seen.add(node.pk)
                node = node.parent

            if self.parent.account_type != self.account_type:
                raise ValidationError(
                    {"parent": "Parent account must have the same account type"}
                )

        if self.pk:
            previous_type = (
                Account.objects.filter(pk=self.pk)
                .values_list("account_type", flat=True)
                .first()
            )
            if (
                previous_type
                and previous_type != self.account_type
                and self.journal_lines.exists()
            ):
                raise ValidationError(
                    {"account_type": "Account type cannot change once postings exist"}
                )

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
