# inventory/apps.py

"""
INVENTORY APP CONFIG

Product variants (stock-keeping units) carrying the running
weighted-average cost, plus the immutable stock movement ledger.
"""

from django.apps import AppConfig


class InventoryConfig(AppConfig):
    default_auto_field = "django.db.models.BigAutoField"
    name = "inventory"
    verbose_name = "Inventory"
