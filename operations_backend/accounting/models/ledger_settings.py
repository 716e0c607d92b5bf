# accounting/models/ledger_settings.py

"""
======================================================
PATH: accounting/models/ledger_settings.py
======================================================
LEDGER SETTINGS (TYPED SINGLETON)

Holds ledger-wide administrative configuration as explicit fields.

Security:
- The period reopen credential is stored ONLY as a Django password hash
  (make_password / check_password). The raw value is never persisted.
"""

from __future__ import annotations

from django.contrib.auth.hashers import check_password, make_password
from django.core.exceptions import ValidationError
from django.db import models

SINGLETON_PK = 1


class LedgerSettings(models.Model):
    company_name = models.CharField(max_length=200, blank=True, default="")

    reopen_credential_hash = models.CharField(
        max_length=255,
        blank=True,
        default="",
        help_text="Password-hasher digest of the period reopen credential.",
    )

    updated_at = models.DateTimeField(auto_now=True)

    class Meta:
        verbose_name = "Ledger Settings"
        verbose_name_plural = "Ledger Settings"

    def __str__(self):
        return f"Ledger Settings ({self.company_name or 'unnamed'})"

    @classmethod
    def load(cls) -> "LedgerSettings":
        obj, _ = cls.objects.get_or_create(pk=SINGLETON_PK)
        return obj

    @property
    def has_reopen_credential(self) -> bool:
        return bool(self.reopen_credential_hash)

    def set_reopen_credential(self, raw: str) -> None:
        raw = (raw or "").strip()
        if not raw:
            raise ValidationError("Reopen credential cannot be blank")
        self.reopen_credential_hash = make_password(raw)

    def verify_reopen_credential(self, raw: str | None) -> bool:
        raw = (raw or "").strip()
        if not self.reopen_credential_hash or not raw:
            return False
        return check_password(raw, self.reopen_credential_hash)

    def save(self, *args, **kwargs):
        self.pk = SINGLETON_PK
        return super().save(*args, **kwargs)

    def delete(self, *args, **kwargs):
        raise ValidationError("Ledger settings cannot be deleted")
