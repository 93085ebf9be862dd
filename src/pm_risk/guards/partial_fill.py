"""Partial-fill solver: largest trade size that passes every enabled guard.

Binary search is only valid when each guard's pass/fail is monotonic in
size (a smaller trade never fails a check the larger one passed). Under LMSR:
  * price limit: buy avg price rises with size, sell avg price falls
  * slippage: avg price moves away from spot as size grows
  * cost limit: cash leg grows with size
A guard not listed in SIZE_MONOTONIC_GUARDS is refused before searching.
"""

import logging
from dataclasses import dataclass, fields

from src.pm_common.enums import Side, TradeAction
from src.pm_common.errors import InvalidGuardConfigError
from src.pm_market.domain.models import MarketState
from src.pm_risk.guards.models import GuardConfig, GuardEvaluation, GuardStatus
from src.pm_risk.guards.validator import evaluate_guards

logger = logging.getLogger(__name__)

PARTIAL_FILL_MAX_ITERATIONS = 16

SIZE_MONOTONIC_GUARDS: frozenset[str] = frozenset({"price_limit", "slippage", "cost_limit"})


@dataclass(frozen=True)
class PartialFill:
    shares: int                          # 0 = minimum fill not met
    evaluation: GuardEvaluation | None   # evaluation at `shares`, if any
    iterations: int


def ensure_size_monotonic() -> None:
    unproven = {f.name for f in fields(GuardStatus)} - SIZE_MONOTONIC_GUARDS
    if unproven:
        raise InvalidGuardConfigError(
            f"partial fill unsupported for guards without size monotonicity: {sorted(unproven)}"
        )


def find_max_executable(
    side: Side,
    action: TradeAction,
    requested: int,
    config: GuardConfig,
    market: MarketState,
    now: int,
) -> PartialFill:
    """Binary search over [min_fill, requested] for the largest passing size."""
    ensure_size_monotonic()
    min_fill = max(1, config.min_fill_shares or 0)

    floor_eval = evaluate_guards(side, action, min_fill, config, market, now)
    if not floor_eval.passed:
        logger.debug("Partial fill: min fill %d fails guards", min_fill)
        return PartialFill(shares=0, evaluation=None, iterations=0)

    best = floor_eval
    lo, hi = min_fill + 1, requested
    iterations = 0
    while lo <= hi and iterations < PARTIAL_FILL_MAX_ITERATIONS:
        iterations += 1
        mid = (lo + hi) // 2
        evaluation = evaluate_guards(side, action, mid, config, market, now)
        if evaluation.passed:
            best = evaluation
            lo = mid + 1
        else:
            hi = mid - 1

    logger.debug(
        "Partial fill: requested=%d best=%d iterations=%d", requested, best.shares, iterations
    )
    return PartialFill(shares=best.shares, evaluation=best, iterations=iterations)
