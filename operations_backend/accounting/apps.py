# accounting/apps.py

"""
ACCOUNTING APP CONFIG

Event-driven double-entry ledger: chart of accounts, event mappings,
accounting periods, journal posting and financial reports.
"""

from django.apps import AppConfig


class AccountingConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "accounting"
    verbose_name = "Accounting"
