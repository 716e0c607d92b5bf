# accounting/management/commands/validate_ledger.py

from __future__ import annotations

from decimal import Decimal

from django.core.management.base import BaseCommand
from django.db.models import Count, F, Q, Sum
from django.db.models.functions import Coalesce

from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from inventory.models import ProductVariant

ZERO = Decimal("0.00")


class Command(BaseCommand):
    help = "Re-verify ledger integrity: balanced entries, header totals, line shape, global balance, stock quantities."

    def add_arguments(self, parser):
        parser.add_argument(
            "--strict",
            action="store_true",
            help="Fail (non-zero exit) if any error is found.",
        )

    def handle(self, *args, **options):
        strict = bool(options.get("strict"))
        errors = 0

        self.stdout.write(self.style.MIGRATE_HEADING("Ledger Validation"))

        # -----------------------------
        # 1) Entry lines vs header totals
        # -----------------------------
        entries = JournalEntry.objects.annotate(
            line_debit=Coalesce(Sum("lines__debit"), ZERO),
            line_credit=Coalesce(Sum("lines__credit"), ZERO),
            line_count=Count("lines"),
        )

        unbalanced = list(
            entries.exclude(line_debit=F("line_credit")).values_list("id", "line_debit", "line_credit")
        )
        if unbalanced:
            errors += len(unbalanced)
            self.stderr.write(self.style.ERROR(f"[FAIL] Unbalanced entries: {len(unbalanced)}"))
            for eid, dr, cr in unbalanced[:10]:
                self.stderr.write(f"  entry_id={eid} debit={dr} credit={cr}")
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every entry balances"))

        header_mismatch = list(
            entries.filter(
                ~Q(total_debit=F("line_debit")) | ~Q(total_credit=F("line_credit"))
            ).values_list("id", flat=True)
        )
        if header_mismatch:
            errors += len(header_mismatch)
            self.stderr.write(self.style.ERROR(f"[FAIL] Header totals differ from lines: {len(header_mismatch)}"))
            self.stderr.write("  Example IDs: " + ", ".join(str(i) for i in header_mismatch[:10]))
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Header totals match lines"))

        empty = list(entries.filter(line_count__lt=2).values_list("id", flat=True))
        if empty:
            errors += len(empty)
            self.stderr.write(self.style.ERROR(f"[FAIL] Entries with fewer than two lines: {len(empty)}"))
            self.stderr.write("  Example IDs: " + ", ".join(str(i) for i in empty[:10]))

        # -----------------------------
        # 2) Line shape (exactly one side)
        # -----------------------------
        mixed = JournalLine.objects.filter(
            Q(debit__gt=0, credit__gt=0) | Q(debit=0, credit=0) | Q(debit__lt=0) | Q(credit__lt=0)
        ).count()
        if mixed:
            errors += mixed
            self.stderr.write(self.style.ERROR(f"[FAIL] Malformed journal lines: {mixed}"))
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Every line is a single debit or credit"))

        # -----------------------------
        # 3) Global balance
        # -----------------------------
        totals = JournalLine.objects.aggregate(
            debit=Coalesce(Sum("debit"), ZERO),
            credit=Coalesce(Sum("credit"), ZERO),
        )
        if totals["debit"] != totals["credit"]:
            errors += 1
            self.stderr.write(
                self.style.ERROR(f"[FAIL] Ledger not balanced: debits={totals['debit']} credits={totals['credit']}")
            )
        else:
            self.stdout.write(
                self.style.SUCCESS(f"[OK] Ledger balanced: debits={totals['debit']} credits={totals['credit']}")
            )

        # -----------------------------
        # 4) Variant quantity vs movement history
        # -----------------------------
        drift = list(
            ProductVariant.objects.annotate(moved=Coalesce(Sum("stock_movements__quantity"), 0))
            .exclude(quantity_on_hand=F("moved"))
            .values_list("sku", "quantity_on_hand", "moved")
        )
        if drift:
            errors += len(drift)
            self.stderr.write(self.style.ERROR(f"[FAIL] Variant quantity differs from movements: {len(drift)}"))
            for sku, qty, moved in drift[:10]:
                self.stderr.write(f"  sku={sku} on_hand={qty} movements={moved}")
        else:
            self.stdout.write(self.style.SUCCESS("[OK] Variant quantities match movement history"))

        self.stdout.write("")
        if errors == 0:
            self.stdout.write(self.style.SUCCESS("VALIDATION PASSED"))
        else:
            self.stderr.write(self.style.ERROR(f"VALIDATION FOUND ISSUES: {errors} problem(s)"))

        return self._exit(strict and errors > 0)

    def _exit(self, fail: bool):
        if fail:
            raise SystemExit(1)
        return None
