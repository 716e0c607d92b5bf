# accounting/management/commands/set_reopen_credential.py

from getpass import getpass

from django.core.exceptions import ValidationError
from django.core.management.base import BaseCommand, CommandError
from django.db import transaction

from accounting.models.ledger_settings import LedgerSettings


class Command(BaseCommand):
    help = "Store the administrative credential required to reopen a closed period (hashed)."

    def add_arguments(self, parser):
        parser.add_argument(
            "--credential",
            dest="credential",
            help="Credential value. Prompted for when omitted.",
        )

    @transaction.atomic
    def handle(self, *args, **options):
        raw = options.get("credential")
        if raw is None:
            raw = getpass("Reopen credential: ")
            if raw != getpass("Repeat: "):
                raise CommandError("Credentials do not match.")

        ledger_settings = LedgerSettings.load()
        try:
            ledger_settings.set_reopen_credential(raw)
        except ValidationError as exc:
            raise CommandError("; ".join(exc.messages)) from exc
        ledger_settings.save()

        self.stdout.write(self.style.SUCCESS("Reopen credential updated."))
