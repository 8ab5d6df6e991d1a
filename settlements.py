"""
Settlement planning: turn a group's balances into pairwise payments.

The default planner is greedy: the largest remaining debtor pays the largest
remaining creditor until one side runs out. It emits at most ``n - 1``
payments for ``n`` unsettled members but is not always the minimum.
``plan_minimal_settlements`` is the exact alternative for small groups.

Both planners work in whole cents. Non-zero balances are converted with the
largest remainder method so the cents of a group add up to its rounded total,
which keeps every member within one cent of zero once the plan is paid.
"""
from __future__ import annotations
import logging
import math
from typing import Dict, List

from models import Settlement

logger = logging.getLogger(__name__)

SETTLE_EPS = 0.01


def _to_cents(balances: Dict[str, float]) -> Dict[str, int]:
    """Whole cents per member, summing to the rounded total (largest remainder)"""
    scaled = {m: round(float(v) * 100, 6) for m, v in balances.items()}
    cents = {m: math.floor(x) for m, x in scaled.items()}
    # floors sum to at most the total and lose less than one cent per member
    short = round(sum(scaled.values())) - sum(cents.values())
    # stable sort: equal remainders keep input order
    by_remainder = sorted(scaled, key=lambda m: round(scaled[m] - cents[m], 6), reverse=True)
    for m in by_remainder[:short]:
        cents[m] += 1
    return cents


def _open_balances(balances: Dict[str, float]) -> Dict[str, int]:
    """Cents of every member not exactly at zero; zero-cent entries dropped"""
    cents = _to_cents({m: v for m, v in balances.items() if v != 0})
    return {m: c for m, c in cents.items() if c != 0}


def _greedy(cents: Dict[str, int], eps: float) -> List[Settlement]:
    debtors = [[m, -c] for m, c in cents.items() if c < 0]
    creditors = [[m, c] for m, c in cents.items() if c > 0]
    # stable sort: equal amounts keep input order
    debtors.sort(key=lambda x: x[1], reverse=True)
    creditors.sort(key=lambda x: x[1], reverse=True)
    drained = max(1, round(eps * 100))

    settlements = []
    i = j = 0
    while i < len(debtors) and j < len(creditors):
        debtor, creditor = debtors[i], creditors[j]
        x = min(debtor[1], creditor[1])
        settlements.append(Settlement(debtor[0], creditor[0], x / 100))
        debtor[1] -= x
        creditor[1] -= x
        if debtor[1] < drained:
            i += 1
        if creditor[1] < drained:
            j += 1
    return settlements


def plan_settlements(balances: Dict[str, float], eps: float = SETTLE_EPS) -> List[Settlement]:
    """
    Greedy settlement: largest debtor pays largest creditor.
    Every member with a non-zero balance takes part; a debtor or creditor is
    dropped once less than *eps* remains.
    Returns list of Settlement(from_member, to_member, amount).
    """
    debtors = sum(1 for v in balances.values() if v < 0)
    creditors = sum(1 for v in balances.values() if v > 0)
    if bool(debtors) != bool(creditors):
        logger.warning(
            "Balances are one-sided (%d debtors, %d creditors); nothing to settle",
            debtors, creditors,
        )
        return []

    settlements = _greedy(_open_balances(balances), eps)
    logger.debug("Planned %d settlements for %d members", len(settlements), len(balances))
    return settlements


def _zero_sum_subsets(cents: List[int]) -> List[List[int]]:
    """
    Partition indexes of *cents* into the maximum number of zero-sum subsets.
    The last subset may carry a remainder when the total is not zero.
    """
    n = len(cents)
    full = (1 << n) - 1
    total = [0] * (full + 1)
    best = [0] * (full + 1)
    for mask in range(1, full + 1):
        low = (mask & -mask).bit_length() - 1
        total[mask] = total[mask & (mask - 1)] + cents[low]
        best[mask] = max(best[mask ^ (1 << k)] for k in range(n) if mask >> k & 1)
        if total[mask] == 0:
            best[mask] += 1

    order = []
    mask = full
    while mask:
        k = max((k for k in range(n) if mask >> k & 1), key=lambda k: best[mask ^ (1 << k)])
        order.append(k)
        mask ^= 1 << k
    order.reverse()

    subsets, current, running = [], [], 0
    for k in order:
        current.append(k)
        running += cents[k]
        if running == 0:
            subsets.append(current)
            current = []
    if current:
        subsets.append(current)
    return subsets


def plan_minimal_settlements(
    balances: Dict[str, float],
    eps: float = SETTLE_EPS,
    max_members: int = 12,
) -> List[Settlement]:
    """
    Exact minimum-transfer plan for small groups.

    Unsettled members are split into as many zero-sum subsets as possible;
    each subset of size s then settles with s - 1 greedy payments. Runs in
    O(2^n * n), so groups with more than *max_members* unsettled members fall
    back to plan_settlements().
    """
    cents = _open_balances(balances)
    if len(cents) > max_members:
        logger.debug("%d open members exceeds %d; using greedy plan", len(cents), max_members)
        return plan_settlements(balances, eps)
    if not any(c < 0 for c in cents.values()) or not any(c > 0 for c in cents.values()):
        return plan_settlements(balances, eps)

    members = list(cents)
    settlements = []
    for subset in _zero_sum_subsets([cents[m] for m in members]):
        settlements.extend(_greedy({members[k]: cents[members[k]] for k in subset}, eps))
    return settlements


def apply_settlements(balances: Dict[str, float], settlements: List[Settlement]) -> Dict[str, float]:
    """Balances after every settlement is paid; input is not modified"""
    out = dict(balances)
    for s in settlements:
        out[s.from_member] = out.get(s.from_member, 0.0) + s.amount
        out[s.to_member] = out.get(s.to_member, 0.0) - s.amount
    return out


def plan_all_settlements(
    balances_by_group: Dict[str, Dict[str, float]], eps: float = SETTLE_EPS
) -> Dict[str, List[Settlement]]:
    """Greedy plan for every group"""
    return {gid: plan_settlements(b, eps) for gid, b in balances_by_group.items()}
