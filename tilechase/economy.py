"""
Hook durability ledger and coin-pile payment tracking.

These are the collaborators that decide what the follower chases and when it
may leave:

- ``DurabilityLedger`` wears the hook one tick at a time while it is worn. Once
  worn out it charges the repair cost as debt and keeps adding a per-second
  penalty until the debt is settled. While debt is owed the follower is
  needed; once it is settled the follower departs.
- ``PaymentTracker`` watches for the player dropping a pile of coins large
  enough to cover the debt. While a pile is tracked its tile becomes the
  follower's task location. When the pile disappears, the debt is settled
  unless the coins went back into the player's inventory.

Player-facing messages are queued as notices and drained by the session.
"""

from __future__ import annotations

import math
import time
from dataclasses import dataclass
from enum import Enum
from typing import Callable, List, Optional

from pydantic import BaseModel, Field

from .config import Config
from .environment import WorldPoint


def _now_ms() -> float:
    return time.monotonic() * 1000.0


class NoticeKind(str, Enum):
    INFO = "info"
    WARNING = "warning"
    SUCCESS = "success"


@dataclass(frozen=True)
class Notice:
    """A message for the player, raised by the ledger or payment tracker."""

    kind: NoticeKind
    text: str


class LedgerSnapshot(BaseModel):
    """Persisted hook and debt counters."""

    wear_ticks: int = Field(0, ge=0, description="Ticks the current hook has been worn")
    debt: int = Field(0, ge=0, description="Unpaid repair cost plus penalties (gp)")
    lifetime_worn: int = Field(0, ge=0, description="Total ticks any hook was worn")
    lifetime_paid: int = Field(0, ge=0, description="Total debt ever settled (gp)")


class DurabilityLedger:
    """Tracks hook wear, breakage and the resulting debt."""

    def __init__(
        self,
        *,
        durability_ticks: Optional[int] = None,
        repair_cost: Optional[int] = None,
        penalty_per_second: Optional[int] = None,
        tick_length_ms: Optional[int] = None,
        snapshot: Optional[LedgerSnapshot] = None,
        clock: Callable[[], float] = _now_ms,
    ):
        self.durability_ticks = (
            Config.HOOK_DURABILITY_TICKS if durability_ticks is None else durability_ticks
        )
        self.repair_cost = Config.REPAIR_COST if repair_cost is None else repair_cost
        self.penalty_per_second = (
            Config.PENALTY_PER_SECOND if penalty_per_second is None else penalty_per_second
        )
        self.tick_length_ms = Config.TICK_LENGTH_MS if tick_length_ms is None else tick_length_ms
        self._clock = clock
        self._last_tick_at = 0.0
        self._notices: List[Notice] = []
        self.restore(snapshot or LedgerSnapshot())

    def restore(self, snapshot: LedgerSnapshot) -> None:
        self.wear_ticks = snapshot.wear_ticks
        self.debt = snapshot.debt
        self.lifetime_worn = snapshot.lifetime_worn
        self.lifetime_paid = snapshot.lifetime_paid
        self._broken = self.wear_ticks >= self.durability_ticks

    def snapshot(self) -> LedgerSnapshot:
        return LedgerSnapshot(
            wear_ticks=self.wear_ticks,
            debt=self.debt,
            lifetime_worn=self.lifetime_worn,
            lifetime_paid=self.lifetime_paid,
        )

    # --- Tick ---

    def on_tick(self, hook_equipped: bool) -> bool:
        """Advance one logical tick. Returns True when counters changed."""
        self._last_tick_at = self._clock()
        if not hook_equipped:
            return False

        self.wear_ticks += 1
        self.lifetime_worn += 1
        if self._broken:
            penalty = self.penalty_per_second * (self.tick_length_ms / 1000.0)
            self.debt += math.ceil(penalty)
        else:
            self._check_broken()
        return True

    def _check_broken(self) -> None:
        broken = self.wear_ticks >= self.durability_ticks
        if broken and not self._broken:
            self.debt += self.repair_cost
            self.add_notice("Your pirate's hook has broken!", NoticeKind.WARNING)
        self._broken = broken

    # --- Accessors ---

    @property
    def is_broken(self) -> bool:
        return self._broken

    @property
    def has_unpaid_debt(self) -> bool:
        return self.debt > 0

    @property
    def total_repair_cost(self) -> int:
        return self.debt

    @property
    def current_durability(self) -> int:
        return max(0, self.durability_ticks - self.wear_ticks)

    @property
    def accrued_cost(self) -> int:
        """Debt when owing, otherwise the worn share of the repair cost."""
        if self.has_unpaid_debt:
            return self.debt
        if self.durability_ticks == 0:
            return 0
        worn = min(self.wear_ticks / self.durability_ticks, 1.0)
        return int(worn * self.repair_cost)

    def smooth_time_remaining(self, now: Optional[float] = None) -> str:
        """Remaining hook life as ``MM:SS`` or ``H:MM:SS``.

        Counts down between ticks; the sub-tick correction never exceeds one
        tick so a stalled tick loop does not make the timer run ahead.
        """
        now = self._clock() if now is None else now
        base_ms = self.current_durability * self.tick_length_ms
        since_tick = min(max(now - self._last_tick_at, 0.0), float(self.tick_length_ms))
        remaining_ms = base_ms - since_tick
        if remaining_ms <= 0:
            return "00:00"

        total_seconds = int(remaining_ms // 1000)
        hours, remainder = divmod(total_seconds, 3600)
        minutes, seconds = divmod(remainder, 60)
        if hours > 0:
            return f"{hours}:{minutes:02d}:{seconds:02d}"
        return f"{minutes:02d}:{seconds:02d}"

    # --- Actions ---

    def settle_debt(self) -> int:
        """Clear the debt and return the amount paid."""
        paid = self.debt
        self.lifetime_paid += paid
        self.debt = 0
        self.add_notice("Payment accepted. Debt cleared.", NoticeKind.SUCCESS)
        return paid

    def repair(self) -> None:
        self.wear_ticks = 0
        self._broken = False
        self.add_notice("Your pirate's hook has been repaired!", NoticeKind.SUCCESS)

    def drain_notices(self) -> List[Notice]:
        notices, self._notices = self._notices, []
        return notices

    def add_notice(self, text: str, kind: NoticeKind = NoticeKind.INFO) -> None:
        self._notices.append(Notice(kind=kind, text=text))


class PaymentOutcome(str, Enum):
    IGNORED = "ignored"
    FRAUD = "fraud"
    SETTLED = "settled"


class PaymentTracker:
    """Follows a dropped coin pile until it despawns."""

    def __init__(self, ledger: DurabilityLedger):
        self.ledger = ledger
        self.location: Optional[WorldPoint] = None
        self.amount = 0
        self._last_coin_count = 0

    @property
    def is_tracking(self) -> bool:
        return self.location is not None

    def note_inventory_coins(self, count: int) -> None:
        """Record the inventory coin count at the start of a tick."""
        self._last_coin_count = count

    def drop_coins(self, quantity: int, location: WorldPoint) -> bool:
        """Start tracking a dropped pile if it can pay off the current debt."""
        if not self.ledger.is_broken or not self.ledger.has_unpaid_debt:
            return False
        if quantity < self.ledger.total_repair_cost:
            return False

        self.amount = quantity
        self.location = location
        self.ledger.add_notice("[Insurance Agent]: Don't touch that pile. I'm counting it.")
        return True

    def pile_despawned(
        self, quantity: int, location: WorldPoint, inventory_coins: int
    ) -> PaymentOutcome:
        """Resolve a vanished pile: picked back up (fraud) or left to despawn (paid)."""
        if self.location is None:
            return PaymentOutcome.IGNORED
        if quantity != self.amount or location != self.location:
            return PaymentOutcome.IGNORED

        if inventory_coins > self._last_coin_count:
            outcome = PaymentOutcome.FRAUD
            self.ledger.add_notice("[Insurance Agent]: I saw that! No refund!", NoticeKind.WARNING)
        else:
            outcome = PaymentOutcome.SETTLED
            self.ledger.settle_debt()

        self.location = None
        self.amount = 0
        return outcome
