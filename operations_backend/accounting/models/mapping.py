# accounting/models/mapping.py

"""
======================================================
PATH: accounting/models/mapping.py
======================================================
ACCOUNT MAPPING MODEL (EVENT → ACCOUNT RULES)

One row says: "for event_type (optionally narrowed by event_context),
put the <amount_weight> amount on <side> of <account>".

Rules:
- event_context NULL is a wildcard row (matches any context)
- A context-specific row beats a wildcard row for the same side + weight
- Higher priority wins; equal top priority is a configuration error
  (surfaced by the resolver, not silently picked)
- Rows are read fresh on every post
"""

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.db import models

from accounting.models.account import Account


class EventType(models.TextChoices):
    CONFIRM_PURCHASE = "confirm_purchase", "Confirm Purchase (Goods Received)"
    PURCHASE_PAYMENT = "purchase_payment", "Purchase Payment"
    CONFIRM_RETURN_PURCHASE = "confirm_return_purchase", "Purchase Return"
    CONFIRM_SALES_ORDER = "confirm_sales_order", "Confirm Sales Order"
    SALES_RETURN = "sales_return", "Sales Return"
    CREDIT_NOTE = "credit_note", "Credit Note"
    CUSTOMER_PAYMENT = "customer_payment", "Customer Payment"
    MARKETPLACE_PAYOUT = "marketplace_payout", "Marketplace Payout"
    STOCK_OPNAME = "stock_opname", "Stock Count (Opname)"
    STOCK_ADJUSTMENT = "stock_adjustment", "Stock Adjustment"
    MANUAL_JOURNAL = "manual_journal", "Manual Journal"


class EventContext(models.TextChoices):
    CASH = "cash", "Cash"
    BANK = "bank", "Bank"
    MANUAL = "manual", "Manual / Offline"
    MARKETPLACE = "marketplace", "Marketplace"
    INCREASE = "increase", "Increase"
    DECREASE = "decrease", "Decrease"


class AmountWeight(models.TextChoices):
    GROSS = "gross", "Gross Amount"
    NET = "net", "Net Amount (gross - discount - fee)"
    DISCOUNT = "discount", "Discount Amount"
    FEE = "fee", "Fee Amount"
    PAID = "paid", "Paid Amount"
    COST = "cost", "Cost Amount (HPP)"


class AccountMapping(models.Model):
    DEBIT = "debit"
    CREDIT = "credit"

    SIDES = [
        (DEBIT, "Debit"),
        (CREDIT, "Credit"),
    ]

    event_type = models.CharField(max_length=40, choices=EventType.choices)

    event_context = models.CharField(
        max_length=40,
        null=True,
        blank=True,
        help_text="Optional qualifier (cash, bank, manual, marketplace, increase, decrease). NULL matches any.",
    )

    account = models.ForeignKey(
        Account,
        on_delete=models.PROTECT,
        related_name="mappings",
    )

    side = models.CharField(max_length=6, choices=SIDES)

    amount_weight = models.CharField(
        max_length=20,
        choices=AmountWeight.choices,
        default=AmountWeight.GROSS,
    )

    priority = models.IntegerField(default=0)
    is_active = models.BooleanField(default=True)

    notes = models.CharField(max_length=255, blank=True, default="")

    created_at = models.DateTimeField(auto_now_add=True)
    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        ordering = ["event_type", "side", "-priority", "id"]
        verbose_name = "Account Mapping"
        verbose_name_plural = "Account Mappings"
        indexes = [
            models.Index(fields=["event_type", "is_active"], name="idx_mapping_event_active"),
            models.Index(fields=["event_type", "event_context", "side"], name="idx_mapping_lookup"),
        ]

    def __str__(self):
        ctx = self.event_context or "*"
        return f"{self.event_type}/{ctx} {self.side} {self.amount_weight} → {self.account_id} (p{self.priority})"

    def clean(self):
        if self.event_context is not None:
            ctx = str(self.event_context).strip().lower()
            self.event_context = ctx or None

        if self.event_type == EventType.MANUAL_JOURNAL:
            raise ValidationError(
                {"event_type": "Manual journals carry explicit lines and take no mappings"}
            )

        if self.side not in (self.DEBIT, self.CREDIT):
            raise ValidationError({"side": "side must be debit or credit"})

    def save(self, *args, **kwargs):
        self.full_clean()
        return super().save(*args, **kwargs)
