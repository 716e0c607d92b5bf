# accounting/admin.py

from django.contrib import admin

from accounting.models.account import Account
from accounting.models.journal import JournalEntry
from accounting.models.journal_line import JournalLine
from accounting.models.ledger_settings import LedgerSettings
from accounting.models.mapping import AccountMapping
from accounting.models.period import AccountingPeriod

# ============================================================
# ACCOUNT
# ============================================================


@admin.register(Account)
class AccountAdmin(admin.ModelAdmin):
    list_display = (
        "code",
        "name",
        "account_type",
        "parent",
        "is_active",
    )
    list_filter = ("account_type", "is_active")
    search_fields = ("code", "name")
    ordering = ("code",)
    readonly_fields = ("created_at", "updated_at")
    autocomplete_fields = ("parent",)

    fieldsets = (
        (
            "Account Identity",
            {
                "fields": ("code", "name", "account_type", "parent"),
            },
        ),
        (
            "Status",
            {
                "fields": ("is_active",),
            },
        ),
        (
            "System Fields",
            {
                "fields": ("created_at", "updated_at"),
            },
        ),
    )

    def has_delete_permission(self, request, obj=None):
        # Deactivate instead; lines and mappings PROTECT the row anyway.
        return False


# ============================================================
# ACCOUNT MAPPING
# ============================================================


@admin.register(AccountMapping)
class AccountMappingAdmin(admin.ModelAdmin):
    list_display = (
        "event_type",
        "event_context",
        "side",
        "amount_weight",
        "account",
        "priority",
        "is_active",
    )
    list_filter = ("event_type", "side", "amount_weight", "is_active")
    search_fields = ("event_type", "event_context", "account__code", "account__name")
    ordering = ("event_type", "side", "-priority")
    readonly_fields = ("created_at", "updated_at")
    autocomplete_fields = ("account",)


# ============================================================
# ACCOUNTING PERIOD
# ============================================================


@admin.register(AccountingPeriod)
class AccountingPeriodAdmin(admin.ModelAdmin):
    list_display = ("name", "start_date", "end_date", "status", "closed_at", "closed_by")
    list_filter = ("status",)
    ordering = ("-start_date",)

    # Status changes go through the period service (close / reopen).
    readonly_fields = ("status", "closed_at", "closed_by", "created_at", "updated_at")

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# JOURNAL ENTRY (READ-ONLY)
# ============================================================


class JournalLineInline(admin.TabularInline):
    model = JournalLine
    extra = 0
    can_delete = False
    fields = ("account", "debit", "credit", "description")
    readonly_fields = fields

    def has_add_permission(self, request, obj=None):
        return False

    def has_change_permission(self, request, obj=None):
        return False


@admin.register(JournalEntry)
class JournalEntryAdmin(admin.ModelAdmin):
    list_display = (
        "id",
        "entry_date",
        "event_type",
        "event_context",
        "reference_type",
        "reference_id",
        "total_debit",
        "created_at",
    )
    list_filter = ("event_type", "entry_date")
    search_fields = ("description", "reference_type", "reference_id")
    ordering = ("-entry_date", "-id")
    inlines = (JournalLineInline,)

    readonly_fields = (
        "entry_date",
        "description",
        "event_type",
        "event_context",
        "reference_type",
        "reference_id",
        "total_debit",
        "total_credit",
        "posted_by",
        "created_at",
    )

    def has_add_permission(self, request):
        return False

    def has_change_permission(self, request, obj=None):
        return False

    def has_delete_permission(self, request, obj=None):
        return False


# ============================================================
# LEDGER SETTINGS (SINGLETON)
# ============================================================


@admin.register(LedgerSettings)
class LedgerSettingsAdmin(admin.ModelAdmin):
    list_display = ("company_name", "has_reopen_credential", "updated_at")
    fields = ("company_name", "updated_at")
    readonly_fields = ("updated_at",)

    @admin.display(boolean=True, description="Reopen credential set")
    def has_reopen_credential(self, obj):
        return obj.has_reopen_credential

    def has_add_permission(self, request):
        return not LedgerSettings.objects.exists()

    def has_delete_permission(self, request, obj=None):
        return False
