# accounting/management/commands/seed_chart.py

from django.core.management.base import BaseCommand

from accounting.models.ledger_settings import LedgerSettings
from accounting.services.chart_service import seed_default_chart


class Command(BaseCommand):
    help = "Seed the default chart of accounts + event mappings (idempotent)"

    def add_arguments(self, parser):
        parser.add_argument(
            "--company",
            dest="company",
            help="Company name printed on reports (optional).",
        )

    def handle(self, *args, **options):
        self.stdout.write("Seeding default Chart of Accounts and mappings...")

        result = seed_default_chart()

        company = (options.get("company") or "").strip()
        if company:
            ledger_settings = LedgerSettings.load()
            ledger_settings.company_name = company
            ledger_settings.save()

        self.stdout.write(
            self.style.SUCCESS(
                "Chart ready: "
                f"{result['accounts_created']} accounts created, "
                f"{result['accounts_updated']} updated, "
                f"{result['mappings_created']} mappings created."
            )
        )
