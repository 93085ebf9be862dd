"""Guard configuration and guard results.

Every limit is an explicit Optional: None means "disabled", so a limit of
exactly zero is expressible. GuardConfig.from_wire() accepts the legacy
zero-sentinel encoding used by instruction data and older clients, except
for min_fill_shares, which must be sent explicitly when allow_partial is set.
"""

from dataclasses import dataclass, fields

from src.pm_common.enums import GuardFailure
from src.pm_common.errors import InvalidGuardConfigError


@dataclass(frozen=True)
class SlippageGuard:
    max_slippage_bps: int
    quote_price: int        # e6
    quote_timestamp: int    # unix seconds


@dataclass(frozen=True)
class GuardConfig:
    price_limit: int | None = None          # e6 per share
    slippage: SlippageGuard | None = None
    max_total_cost: int | None = None       # e6
    allow_partial: bool = False
    min_fill_shares: int | None = None      # e6; ignored unless allow_partial

    @classmethod
    def from_wire(
        cls,
        price_limit_e6: int = 0,
        max_slippage_bps: int = 0,
        quote_price_e6: int = 0,
        quote_timestamp: int = 0,
        max_total_cost_e6: int = 0,
        allow_partial: bool = False,
        min_fill_shares_e6: int | None = None,
    ) -> "GuardConfig":
        slippage_fields = (max_slippage_bps, quote_price_e6, quote_timestamp)
        slippage = None
        if all(slippage_fields):
            slippage = SlippageGuard(max_slippage_bps, quote_price_e6, quote_timestamp)
        elif any(slippage_fields):
            raise InvalidGuardConfigError(
                "slippage guard needs max_slippage_bps, quote_price and quote_timestamp together"
            )
        return cls(
            price_limit=price_limit_e6 or None,
            slippage=slippage,
            max_total_cost=max_total_cost_e6 or None,
            allow_partial=allow_partial,
            # 0 is an explicit "any fill"; None is rejected when allow_partial is set
            min_fill_shares=min_fill_shares_e6 if allow_partial else None,
        )


@dataclass(frozen=True)
class GuardCheck:
    passed: bool
    failure: GuardFailure | None = None
    reason: str | None = None


@dataclass(frozen=True)
class GuardStatus:
    """Result of each enabled check; None = check disabled."""

    price_limit: GuardCheck | None = None
    slippage: GuardCheck | None = None
    cost_limit: GuardCheck | None = None

    def checks(self) -> list[tuple[str, GuardCheck]]:
        return [
            (f.name, getattr(self, f.name))
            for f in fields(self)
            if getattr(self, f.name) is not None
        ]

    @property
    def all_passed(self) -> bool:
        return all(check.passed for _, check in self.checks())

    @property
    def first_failure(self) -> GuardCheck | None:
        for _, check in self.checks():
            if not check.passed:
                return check
        return None


@dataclass(frozen=True)
class GuardEvaluation:
    shares: int
    execution_price: int    # e6 average price, fee excluded
    total_cost: int         # e6 cash incl. fee (buy: paid, sell: received)
    fee: int
    status: GuardStatus

    @property
    def passed(self) -> bool:
        return self.status.all_passed
