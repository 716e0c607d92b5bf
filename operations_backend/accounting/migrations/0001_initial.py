"""
======================================================
PATH: accounting/migrations/0001_initial.py
======================================================
MIGRATION: INITIAL LEDGER SCHEMA

Creates:
- Account (parent-linked chart of accounts)
- AccountMapping (event -> account rules)
- AccountingPeriod (open/closed posting gates)
- JournalEntry + JournalLine (balanced, immutable ledger)
- LedgerSettings (typed singleton, hashed reopen credential)
"""

from __future__ import annotations

from decimal import Decimal

from django.db import migrations, models
import django.db.models.deletion


class Migration(migrations.Migration):
    initial = True

    dependencies = []

    operations = [
        migrations.CreateModel(
            name="Account",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("code", models.CharField(max_length=20, unique=True)),
                ("name", models.CharField(max_length=150)),
                (
                    "account_type",
                    models.CharField(
                        choices=[
                            ("ASSET", "Asset"),
                            ("LIABILITY", "Liability"),
                            ("EQUITY", "Equity"),
                            ("REVENUE", "Revenue"),
                            ("EXPENSE", "Expense"),
                        ],
                        max_length=20,
                    ),
                ),
                ("is_active", models.BooleanField(default=True)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "parent",
                    models.ForeignKey(
                        blank=True,
                        help_text="Optional rollup parent (same account type).",
                        null=True,
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="children",
                        to="accounting.account",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account",
                "verbose_name_plural": "Accounts",
                "ordering": ["code"],
                "indexes": [
                    models.Index(fields=["account_type"], name="idx_account_type"),
                    models.Index(fields=["is_active"], name="idx_account_active"),
                ],
                "constraints": [
                    models.CheckConstraint(condition=~models.Q(code=""), name="chk_account_code_not_blank"),
                    models.CheckConstraint(condition=~models.Q(name=""), name="chk_account_name_not_blank"),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountingPeriod",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("name", models.CharField(max_length=100)),
                ("start_date", models.DateField()),
                ("end_date", models.DateField()),
                (
                    "status",
                    models.CharField(
                        choices=[("open", "Open"), ("closed", "Closed")],
                        default="open",
                        max_length=10,
                    ),
                ),
                ("closed_at", models.DateTimeField(blank=True, null=True)),
                (
                    "closed_by",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Identifier of the actor that closed the period.",
                        max_length=150,
                    ),
                ),
                ("notes", models.TextField(blank=True, default="")),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Accounting Period",
                "verbose_name_plural": "Accounting Periods",
                "ordering": ["-start_date"],
                "indexes": [
                    models.Index(fields=["start_date", "end_date"], name="idx_period_range"),
                    models.Index(fields=["status"], name="idx_period_status"),
                ],
                "constraints": [
                    models.UniqueConstraint(fields=("start_date",), name="uniq_accounting_period_start"),
                    models.CheckConstraint(
                        condition=models.Q(end_date__gte=models.F("start_date")),
                        name="chk_accounting_period_end_gte_start",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="LedgerSettings",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("company_name", models.CharField(blank=True, default="", max_length=200)),
                (
                    "reopen_credential_hash",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Password-hasher digest of the period reopen credential.",
                        max_length=255,
                    ),
                ),
                ("updated_at", models.DateTimeField(auto_now=True)),
            ],
            options={
                "verbose_name": "Ledger Settings",
                "verbose_name_plural": "Ledger Settings",
            },
        ),
        migrations.CreateModel(
            name="JournalEntry",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("entry_date", models.DateField(help_text="Accounting effective date")),
                ("description", models.TextField(help_text="Narrative description of the journal entry")),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("confirm_purchase", "Confirm Purchase (Goods Received)"),
                            ("purchase_payment", "Purchase Payment"),
                            ("confirm_return_purchase", "Purchase Return"),
                            ("confirm_sales_order", "Confirm Sales Order"),
                            ("sales_return", "Sales Return"),
                            ("credit_note", "Credit Note"),
                            ("customer_payment", "Customer Payment"),
                            ("marketplace_payout", "Marketplace Payout"),
                            ("stock_opname", "Stock Count (Opname)"),
                            ("stock_adjustment", "Stock Adjustment"),
                            ("manual_journal", "Manual Journal"),
                        ],
                        max_length=40,
                    ),
                ),
                ("event_context", models.CharField(blank=True, default="", max_length=40)),
                (
                    "reference_type",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Kind of originating business object (purchase, sales_order, payment, stock_count, ...)",
                        max_length=50,
                    ),
                ),
                (
                    "reference_id",
                    models.CharField(
                        blank=True,
                        default="",
                        help_text="Opaque id of the originating business object",
                        max_length=100,
                    ),
                ),
                ("total_debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("total_credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("posted_by", models.CharField(blank=True, default="", max_length=150)),
                (
                    "created_at",
                    models.DateTimeField(
                        auto_now_add=True,
                        help_text="Timestamp when the journal entry was created",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Entry",
                "verbose_name_plural": "Journal Entries",
                "ordering": ["-entry_date", "-created_at"],
                "indexes": [
                    models.Index(fields=["entry_date"], name="idx_journal_entry_date"),
                    models.Index(fields=["created_at"], name="idx_journal_created_at"),
                    models.Index(fields=["event_type"], name="idx_journal_event_type"),
                    models.Index(fields=["reference_type", "reference_id"], name="idx_journal_reference"),
                ],
                "constraints": [
                    models.UniqueConstraint(
                        condition=~models.Q(reference_id=""),
                        fields=("event_type", "event_context", "reference_type", "reference_id"),
                        name="uniq_journal_event_reference",
                    ),
                    models.CheckConstraint(
                        condition=models.Q(total_debit=models.F("total_credit")),
                        name="chk_journal_balanced",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="JournalLine",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                ("debit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("credit", models.DecimalField(decimal_places=2, default=Decimal("0.00"), max_digits=18)),
                ("description", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="journal_lines",
                        to="accounting.account",
                    ),
                ),
                (
                    "journal_entry",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.CASCADE,
                        related_name="lines",
                        to="accounting.journalentry",
                    ),
                ),
            ],
            options={
                "verbose_name": "Journal Line",
                "verbose_name_plural": "Journal Lines",
                "ordering": ["id"],
                "indexes": [
                    models.Index(fields=["account"], name="idx_journal_line_account"),
                    models.Index(fields=["journal_entry"], name="idx_journal_line_entry"),
                ],
                "constraints": [
                    models.CheckConstraint(
                        condition=models.Q(debit__gte=0) & models.Q(credit__gte=0),
                        name="chk_journal_line_non_negative",
                    ),
                    models.CheckConstraint(
                        condition=(models.Q(debit__gt=0) & models.Q(credit=0))
                        | (models.Q(debit=0) & models.Q(credit__gt=0)),
                        name="chk_journal_line_one_side",
                    ),
                ],
            },
        ),
        migrations.CreateModel(
            name="AccountMapping",
            fields=[
                ("id", models.BigAutoField(auto_created=True, primary_key=True, serialize=False, verbose_name="ID")),
                (
                    "event_type",
                    models.CharField(
                        choices=[
                            ("confirm_purchase", "Confirm Purchase (Goods Received)"),
                            ("purchase_payment", "Purchase Payment"),
                            ("confirm_return_purchase", "Purchase Return"),
                            ("confirm_sales_order", "Confirm Sales Order"),
                            ("sales_return", "Sales Return"),
                            ("credit_note", "Credit Note"),
                            ("customer_payment", "Customer Payment"),
                            ("marketplace_payout", "Marketplace Payout"),
                            ("stock_opname", "Stock Count (Opname)"),
                            ("stock_adjustment", "Stock Adjustment"),
                            ("manual_journal", "Manual Journal"),
                        ],
                        max_length=40,
                    ),
                ),
                (
                    "event_context",
                    models.CharField(
                        blank=True,
                        help_text="Optional qualifier (cash, bank, manual, marketplace, increase, decrease). NULL matches any.",
                        max_length=40,
                        null=True,
                    ),
                ),
                ("side", models.CharField(choices=[("debit", "Debit"), ("credit", "Credit")], max_length=6)),
                (
                    "amount_weight",
                    models.CharField(
                        choices=[
                            ("gross", "Gross Amount"),
                            ("net", "Net Amount (gross - discount - fee)"),
                            ("discount", "Discount Amount"),
                            ("fee", "Fee Amount"),
                            ("paid", "Paid Amount"),
                            ("cost", "Cost Amount (HPP)"),
                        ],
                        default="gross",
                        max_length=20,
                    ),
                ),
                ("priority", models.IntegerField(default=0)),
                ("is_active", models.BooleanField(default=True)),
                ("notes", models.CharField(blank=True, default="", max_length=255)),
                ("created_at", models.DateTimeField(auto_now_add=True)),
                ("updated_at", models.DateTimeField(auto_now=True)),
                (
                    "account",
                    models.ForeignKey(
                        on_delete=django.db.models.deletion.PROTECT,
                        related_name="mappings",
                        to="accounting.account",
                    ),
                ),
            ],
            options={
                "verbose_name": "Account Mapping",
                "verbose_name_plural": "Account Mappings",
                "ordering": ["event_type", "side", "-priority", "id"],
                "indexes": [
                    models.Index(fields=["event_type", "is_active"], name="idx_mapping_event_active"),
                    models.Index(fields=["event_type", "event_context", "side"], name="idx_mapping_lookup"),
                ],
            },
        ),
    ]
