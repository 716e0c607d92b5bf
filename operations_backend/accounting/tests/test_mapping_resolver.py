# accounting/tests/test_mapping_resolver.py

from __future__ import annotations

from django.core.exceptions import ValidationError
from django.test import TestCase

from accounting.models.account import Account
from accounting.models.mapping import AccountMapping, AmountWeight, EventType
from accounting.services.exceptions import (
    MappingAmbiguousError,
    MappingNotFoundError,
    PostingEventError,
)
from accounting.services.mapping_resolver import resolve

DR = AccountMapping.DEBIT
CR = AccountMapping.CREDIT


class MappingResolverTests(TestCase):
    """
    GUARANTEES:
    - Highest priority wins per (side, amount weight)
    - Context-specific rows beat wildcard rows
    - Ties at the top are refused, never guessed
    - Inactive rows / inactive accounts never resolve
    """

    def setUp(self):
        self.cash = Account.objects.create(code="1000", name="Cash", account_type=Account.ASSET)
        self.bank = Account.objects.create(code="1010", name="Bank", account_type=Account.ASSET)
        self.ap = Account.objects.create(code="2000", name="Accounts Payable", account_type=Account.LIABILITY)

    def _map(self, account, side, *, ctx=None, weight=AmountWeight.PAID, priority=0, active=True):
        return AccountMapping.objects.create(
            event_type=EventType.PURCHASE_PAYMENT,
            event_context=ctx,
            side=side,
            amount_weight=weight,
            account=account,
            priority=priority,
            is_active=active,
        )

    def test_highest_priority_wins(self):
        self._map(self.ap, DR)
        self._map(self.cash, CR, priority=1)
        self._map(self.bank, CR, priority=5)

        resolved = resolve(EventType.PURCHASE_PAYMENT)

        self.assertEqual([ln.account for ln in resolved.debit], [self.ap])
        self.assertEqual([ln.account for ln in resolved.credit], [self.bank])
        self.assertEqual(resolved.credit[0].priority, 5)

    def test_specific_context_beats_wildcard(self):
        self._map(self.ap, DR)
        self._map(self.cash, CR, priority=50)
        self._map(self.bank, CR, ctx="bank", priority=1)

        by_bank = resolve(EventType.PURCHASE_PAYMENT, "BANK ")
        self.assertEqual(by_bank.event_context, "bank")
        self.assertEqual(by_bank.credit[0].account, self.bank)

        # Unmatched context falls back to the wildcard row
        by_cash = resolve(EventType.PURCHASE_PAYMENT, "cash")
        self.assertEqual(by_cash.credit[0].account, self.cash)

    def test_tied_top_priority_is_ambiguous(self):
        self._map(self.ap, DR)
        self._map(self.cash, CR, priority=3)
        self._map(self.bank, CR, priority=3)

        with self.assertRaises(MappingAmbiguousError):
            resolve(EventType.PURCHASE_PAYMENT)

    def test_tie_below_the_top_is_fine(self):
        self._map(self.ap, DR)
        self._map(self.cash, CR, priority=1)
        self._map(self.bank, CR, priority=1)
        self._map(self.bank, CR, priority=9)

        resolved = resolve(EventType.PURCHASE_PAYMENT)
        self.assertEqual(resolved.credit[0].priority, 9)

    def test_missing_side_raises_not_found(self):
        self._map(self.ap, DR)

        with self.assertRaises(MappingNotFoundError):
            resolve(EventType.PURCHASE_PAYMENT)

    def test_inactive_mapping_and_inactive_account_are_ignored(self):
        self._map(self.ap, DR)
        self._map(self.cash, CR, priority=1)
        self._map(self.bank, CR, priority=99, active=False)

        self.assertEqual(resolve(EventType.PURCHASE_PAYMENT).credit[0].account, self.cash)

        self.cash.is_active = False
        self.cash.save()

        with self.assertRaises(MappingNotFoundError):
            resolve(EventType.PURCHASE_PAYMENT)

    def test_one_line_per_amount_weight(self):
        self._map(self.ap, DR, weight=AmountWeight.PAID)
        self._map(self.ap, DR, weight=AmountWeight.FEE)
        self._map(self.cash, CR, weight=AmountWeight.PAID)

        resolved = resolve(EventType.PURCHASE_PAYMENT)

        self.assertEqual(resolved.weights(DR), {AmountWeight.PAID, AmountWeight.FEE})
        self.assertEqual(resolved.weights(CR), {AmountWeight.PAID})
        self.assertEqual(len(resolved.lines), 3)

    def test_unknown_and_manual_event_types_are_rejected(self):
        with self.assertRaises(PostingEventError):
            resolve("not_an_event")
        with self.assertRaises(PostingEventError):
            resolve(EventType.MANUAL_JOURNAL)

    def test_manual_journal_cannot_be_mapped(self):
        with self.assertRaises(ValidationError):
            AccountMapping.objects.create(
                event_type=EventType.MANUAL_JOURNAL,
                side=DR,
                amount_weight=AmountWeight.GROSS,
                account=self.cash,
            )
