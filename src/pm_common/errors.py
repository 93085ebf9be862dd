"""Unified error codes and custom exceptions.

Error code ranges:
  1xxx: Configuration (market, guards, trade request)
  2xxx: Position / held balance
  3xxx: Market lifecycle
  5xxx: Oracle
  6xxx: Settlement
  9xxx: System

Guard failures are NOT exceptions: they are reported as structured
results (see src.pm_common.enums.GuardFailure).
"""


class AppError(Exception):
    """Base application error."""

    def __init__(
        self,
        code: int,
        message: str,
        http_status: int = 500,
    ) -> None:
        self.code = code
        self.message = message
        self.http_status = http_status
        super().__init__(message)


# --- 1xxx: Configuration ---

class InvalidMarketConfigError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1001, f"Invalid market config: {detail}", 422)


class InvalidGuardConfigError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1002, f"Invalid guard config: {detail}", 422)


class InvalidTradeRequestError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(1003, f"Invalid trade request: {detail}", 422)


# --- 2xxx: Position / held balance ---

class InsufficientBalanceError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            2001,
            f"Insufficient balance: required {required} e6, available {available} e6",
            422,
        )


class InsufficientPositionError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(2002, f"Insufficient position: {detail}", 422)


# --- 3xxx: Market lifecycle ---

class MarketNotOpenError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(3001, f"Market is not open for trading (status={status})", 422)


class InvalidMarketTransitionError(AppError):
    def __init__(self, current: str, target: str, detail: str = "") -> None:
        message = f"Cannot move market from {current} to {target}"
        if detail:
            message = f"{message}: {detail}"
        super().__init__(3002, message, 422)


class MarketNotSettledError(AppError):
    def __init__(self, status: str) -> None:
        super().__init__(3003, f"Market is not settled (status={status})", 422)


# --- 5xxx: Oracle ---

class OracleUnavailableError(AppError):
    def __init__(self) -> None:
        super().__init__(5001, "Oracle feed unavailable", 503)


class StaleOracleError(AppError):
    def __init__(self, age: int, max_age: int) -> None:
        super().__init__(5002, f"Oracle is stale: age {age}s exceeds {max_age}s", 422)


# --- 6xxx: Settlement ---

class InsufficientLiquidityError(AppError):
    def __init__(self, required: int, available: int) -> None:
        super().__init__(
            6001,
            f"Insufficient vault liquidity: required {required} e6, available {available} e6",
            422,
        )


class SettlementOverflowError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(6002, f"Settlement arithmetic overflow: {detail}", 500)


# --- 9xxx: System ---

class InvariantViolationError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9003, f"Invariant violated: {detail}", 500)


class RecordLayoutError(AppError):
    def __init__(self, detail: str) -> None:
        super().__init__(9004, f"Invalid account record: {detail}", 422)
