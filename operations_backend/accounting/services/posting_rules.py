# accounting/services/posting_rules.py

"""
======================================================
PATH: accounting/services/posting_rules.py
======================================================
POSTING RULES (EVENT CATALOGUE)

Explicit, tagged rule table: one EventRule per EventType.

A rule declares:
- which event_context values a caller may send
- which input amounts the event accepts
- what stock effect the event has (if any)

The resolver says WHICH accounts; these rules + compute_amounts() say
HOW MUCH each amount weight is worth for one event.
"""

from __future__ import annotations

from dataclasses import dataclass
from decimal import Decimal
from typing import Mapping

from accounting.models.mapping import AmountWeight, EventContext, EventType
from accounting.services.exceptions import PostingEventError
from accounting.services.money import ZERO, money, q2

# Stock effect tags
STOCK_RECEIPT = "receipt"  # IN, recomputes weighted-average cost
STOCK_RETURN_IN = "return_in"  # RETURN inbound (customer return)
STOCK_ISSUE = "issue"  # SALE outbound at current cost
STOCK_RETURN_OUT = "return_out"  # OUT to supplier at current cost
STOCK_COUNT = "count"  # ADJUSTMENT to counted quantity
STOCK_DELTA = "delta"  # ADJUSTMENT by signed delta

G = AmountWeight.GROSS.value
N = AmountWeight.NET.value
D = AmountWeight.DISCOUNT.value
F = AmountWeight.FEE.value
P = AmountWeight.PAID.value
C = AmountWeight.COST.value

INPUT_WEIGHTS = (G, D, F, P, C)


@dataclass(frozen=True)
class EventRule:
    event_type: str
    input_weights: frozenset[str]
    contexts: frozenset[str] = frozenset()
    stock: str | None = None
    stock_required: bool = False
    # count/delta events resolve mappings per direction (increase / decrease)
    derives_context: bool = False

    @property
    def has_stock_effect(self) -> bool:
        return self.stock is not None

    def check_context(self, ctx: str | None) -> None:
        if ctx is None:
            return
        if self.derives_context:
            raise PostingEventError(
                f"{self.event_type} derives its context from the stock direction; do not send event_context"
            )
        if ctx not in self.contexts:
            allowed = ", ".join(sorted(self.contexts)) or "none"
            raise PostingEventError(
                f"Invalid event_context {ctx!r} for {self.event_type} (allowed: {allowed})"
            )


_PAY_CTX = frozenset({EventContext.CASH.value, EventContext.BANK.value})
_SALES_CTX = frozenset({EventContext.MANUAL.value, EventContext.MARKETPLACE.value})

RULES: dict[str, EventRule] = {
    EventType.CONFIRM_PURCHASE: EventRule(
        event_type=EventType.CONFIRM_PURCHASE,
        input_weights=frozenset({G}),
        stock=STOCK_RECEIPT,
    ),
    EventType.PURCHASE_PAYMENT: EventRule(
        event_type=EventType.PURCHASE_PAYMENT,
        input_weights=frozenset({P}),
        contexts=_PAY_CTX,
    ),
    EventType.CONFIRM_RETURN_PURCHASE: EventRule(
        event_type=EventType.CONFIRM_RETURN_PURCHASE,
        input_weights=frozenset({C}),
        stock=STOCK_RETURN_OUT,
    ),
    EventType.CONFIRM_SALES_ORDER: EventRule(
        event_type=EventType.CONFIRM_SALES_ORDER,
        input_weights=frozenset({G, D, F, P, C}),
        contexts=_SALES_CTX,
        stock=STOCK_ISSUE,
    ),
    EventType.SALES_RETURN: EventRule(
        event_type=EventType.SALES_RETURN,
        input_weights=frozenset({G, C}),
        contexts=_SALES_CTX,
        stock=STOCK_RETURN_IN,
    ),
    EventType.CREDIT_NOTE: EventRule(
        event_type=EventType.CREDIT_NOTE,
        input_weights=frozenset({G}),
        contexts=_SALES_CTX,
    ),
    EventType.CUSTOMER_PAYMENT: EventRule(
        event_type=EventType.CUSTOMER_PAYMENT,
        input_weights=frozenset({P}),
        contexts=_PAY_CTX,
    ),
    EventType.MARKETPLACE_PAYOUT: EventRule(
        event_type=EventType.MARKETPLACE_PAYOUT,
        input_weights=frozenset({G, F}),
    ),
    EventType.STOCK_OPNAME: EventRule(
        event_type=EventType.STOCK_OPNAME,
        input_weights=frozenset(),
        stock=STOCK_COUNT,
        stock_required=True,
        derives_context=True,
    ),
    EventType.STOCK_ADJUSTMENT: EventRule(
        event_type=EventType.STOCK_ADJUSTMENT,
        input_weights=frozenset(),
        stock=STOCK_DELTA,
        stock_required=True,
        derives_context=True,
    ),
}


def get_rule(event_type: str) -> EventRule:
    try:
        return RULES[EventType(event_type)]
    except ValueError as exc:
        raise PostingEventError(f"Unknown event_type: {event_type!r}") from exc
    except KeyError as exc:
        raise PostingEventError(f"{event_type} cannot be posted as a mapped event") from exc


def _weight_for_key(key: str) -> str | None:
    k = str(key).strip()
    for w in (*INPUT_WEIGHTS, N):
        if k in (w, f"{w}_amount", f"{w}Amount"):
            return w
    return None


def normalize_amounts(rule: EventRule, amounts: Mapping | None) -> dict[str, Decimal]:
    """
    Accepts keys like `gross`, `gross_amount` or `grossAmount`.
    Returns {weight: Decimal} for the rule's input weights (missing -> 0.00).
    """
    out = {w: ZERO for w in INPUT_WEIGHTS}

    for key, raw in (amounts or {}).items():
        weight = _weight_for_key(key)
        if weight is None:
            raise PostingEventError(f"Unknown amount field: {key!r}")
        if weight == N:
            raise PostingEventError("net is derived (gross - discount - fee); do not send it")

        value = money(raw, field=str(key))
        if value < 0:
            raise PostingEventError(f"Amount {key} cannot be negative")

        if value != ZERO and weight not in rule.input_weights:
            raise PostingEventError(f"{rule.event_type} does not accept a {weight} amount")

        out[weight] = value

    return out


def compute_amounts(
    rule: EventRule,
    amounts: dict[str, Decimal],
    *,
    stock_value: Decimal | None = None,
) -> dict[str, Decimal]:
    """
    Resolve every amount weight for one event.

    stock_value is the monetary value of the event's stock movements
    (None when the event carried no stock lines).
    """
    values = dict(amounts)

    if stock_value is not None:
        derived = q2(stock_value)

        if rule.stock == STOCK_RECEIPT:
            if values[G] != ZERO and values[G] != derived:
                raise PostingEventError(
                    f"gross {values[G]} does not match received stock value {derived}"
                )
            values[G] = derived
        else:
            if values[C] != ZERO:
                raise PostingEventError("cost is derived from stock lines; do not send it")
            values[C] = derived

    net = values[G] - values[D] - values[F]
    if net < 0:
        raise PostingEventError(
            f"discount + fee ({values[D] + values[F]}) exceed gross ({values[G]})"
        )
    values[N] = q2(net)

    return values


def uncovered_weights(amounts: dict[str, Decimal], mapped_weights: set[str]) -> list[str]:
    """
    Non-zero input amounts that no resolved mapping line will carry.
    discount and fee are carried implicitly by a `net` line.
    """
    missing = []
    for w in INPUT_WEIGHTS:
        if amounts.get(w, ZERO) == ZERO or w in mapped_weights:
            continue
        if w in (D, F) and N in mapped_weights:
            continue
        missing.append(w)
    return missing
