"""
Per-tick session driving the follower from the hook economy.

Coordinates one logical tick:
1. Expire overhead speech
2. Wear the hook and update debt (DurabilityLedger)
3. Pick the goal: the tracked coin pile if any, otherwise the player
4. Advance the follower (FollowerController) with "debt paid" as the
   goal-satisfied signal
5. Occasional chatter, player-facing notices
6. Periodic persistence via the injected LedgerStore
7. Tick listeners

The environment (collision data, player position, equipment, inventory) is
injected through the ``FollowerEnvironment`` protocol, so a session can run
against a live host adapter or a scripted scenario alike.
"""

from __future__ import annotations

import inspect
import random
from dataclasses import dataclass
from typing import Any, Awaitable, Callable, Dict, List, Optional, Protocol, Union

from .config import Config
from .economy import DurabilityLedger, NoticeKind, PaymentOutcome, PaymentTracker
from .environment import CollisionGrid, WorldPoint
from .follower import FollowerController, FollowerEvent, FollowerState, FollowerTickReport
from .logging_utils import log_deterministic, log_error, log_info, log_speech, log_success
from .persistence import InMemoryLedgerStore, LedgerStore


SPEECH_TICKS = 4
DEBT_CHATTER_PERCENT = 2
COUNTING_CHATTER_PERCENT = 3

# Coroutine listeners are awaited in registration order.
TickListener = Callable[[int, FollowerTickReport], Union[None, Awaitable[None]]]


class FollowerEnvironment(Protocol):
    """What the session needs to read from the game each tick."""

    def collision_grid(self) -> Optional[CollisionGrid]:
        ...

    def player_position(self) -> Optional[WorldPoint]:
        ...

    def hook_equipped(self) -> bool:
        ...

    def inventory_coins(self) -> int:
        ...


@dataclass(frozen=True)
class OverheadText:
    text: str
    expires_at: int


class FollowerSession:
    """Runs the follower and its economy against an environment, tick by tick."""

    def __init__(
        self,
        environment: FollowerEnvironment,
        *,
        controller: Optional[FollowerController] = None,
        ledger: Optional[DurabilityLedger] = None,
        payments: Optional[PaymentTracker] = None,
        store: Optional[LedgerStore] = None,
        rng: Optional[random.Random] = None,
        save_interval_ticks: Optional[int] = None,
        tick_listeners: Optional[List[TickListener]] = None,
    ):
        """Initialize session with injected collaborators.

        Args:
            environment: Source of collision data, player position and inventory
            controller: Follower state machine (defaults to Config values)
            ledger: Hook durability/debt ledger (defaults to Config values)
            payments: Coin pile tracker bound to ``ledger``
            store: Ledger persistence (defaults to InMemoryLedgerStore)
            rng: Random source for chatter; pass a seeded Random for reproducible runs
            save_interval_ticks: Save every N ticks while the hook is worn
            tick_listeners: Callables invoked after each tick with (tick, report);
                coroutine functions are awaited
        """
        self.environment = environment
        self.controller = controller or FollowerController()
        self.ledger = ledger or DurabilityLedger()
        self.payments = payments or PaymentTracker(self.ledger)
        self.store = store or InMemoryLedgerStore()
        self.rng = rng or random.Random()
        self.save_interval_ticks = (
            Config.SAVE_INTERVAL_TICKS if save_interval_ticks is None else save_interval_ticks
        )
        self.tick_listeners = tick_listeners or []

        self.tick = 0
        self.overhead: Optional[OverheadText] = None

    # ------------------------------------------------------------------
    # Speech
    # ------------------------------------------------------------------

    def say(self, text: str, duration_ticks: int = SPEECH_TICKS) -> None:
        self.overhead = OverheadText(text=text, expires_at=self.tick + duration_ticks)
        log_speech(f"[Insurance Agent] {text}")

    def _chatter(self) -> None:
        if self.payments.is_tracking:
            if self.rng.randrange(100) < COUNTING_CHATTER_PERCENT:
                self.say("Counting...")
        elif self.rng.randrange(100) < DEBT_CHATTER_PERCENT:
            self.say(f"You owe {self.ledger.total_repair_cost} gp!")

    # ------------------------------------------------------------------
    # Player events
    # ------------------------------------------------------------------

    def drop_coins(self, quantity: int) -> bool:
        """The player dropped ``quantity`` coins on their current tile."""
        location = self.environment.player_position()
        if location is None:
            return False
        accepted = self.payments.drop_coins(quantity, location)
        self._flush_notices()
        return accepted

    async def pile_despawned(self, quantity: int, location: WorldPoint) -> PaymentOutcome:
        """A coin pile vanished from ``location``."""
        outcome = self.payments.pile_despawned(
            quantity, location, self.environment.inventory_coins()
        )
        self._flush_notices()
        if outcome is PaymentOutcome.SETTLED:
            await self.store.save(self.ledger.snapshot())
        return outcome

    async def repair_hook(self) -> None:
        self.ledger.repair()
        self._flush_notices()
        await self.store.save(self.ledger.snapshot())

    def _flush_notices(self) -> None:
        for notice in self.ledger.drain_notices():
            if notice.kind is NoticeKind.WARNING:
                log_error(notice.text)
            elif notice.kind is NoticeKind.SUCCESS:
                log_success(notice.text)
            else:
                log_info(notice.text)

    # ------------------------------------------------------------------
    # Tick loop
    # ------------------------------------------------------------------

    async def run(self, num_ticks: int) -> Dict[str, Any]:
        """Run the session for N ticks.

        Returns:
            Dict with ticks completed, final ledger snapshot and follower state
        """
        await self.store.initialize()

        try:
            saved = await self.store.load()
            if saved is not None:
                self.ledger.restore(saved)
                log_info(f"Restored ledger: debt={saved.debt} gp, wear={saved.wear_ticks} ticks")

            print(f"Starting follower session, ticks: {num_ticks}")

            start = self.tick + 1
            for tick in range(start, start + num_ticks):
                try:
                    await self.step(tick)
                except Exception as e:
                    print(f"ERROR at tick {tick}: {e}")
                    raise

            await self.store.save(self.ledger.snapshot())
            print("\nSession complete.")

            return {
                "ticks": num_ticks,
                "ledger": self.ledger.snapshot(),
                "follower_state": self.controller.state,
            }

        finally:
            await self.store.close()

    async def step(self, tick: int) -> FollowerTickReport:
        """Execute a single logical tick."""
        self.tick = tick

        if self.overhead is not None and tick > self.overhead.expires_at:
            self.overhead = None

        equipped = self.environment.hook_equipped()
        was_broken = self.ledger.is_broken
        self.ledger.on_tick(equipped)
        self.payments.note_inventory_coins(self.environment.inventory_coins())

        goal = (
            self.payments.location
            if self.payments.is_tracking
            else self.environment.player_position()
        )
        report = self.controller.tick(
            goal,
            self.environment.collision_grid(),
            goal_satisfied=not self.ledger.has_unpaid_debt,
        )

        if report.event is not FollowerEvent.NONE:
            log_deterministic(f"[Follower] tick {tick}: {report.event.value} at {report.position}")

        if report.state is FollowerState.ACTIVE:
            self._chatter()
        elif report.event is FollowerEvent.DESPAWNED:
            self.overhead = None

        self._flush_notices()

        broke_now = self.ledger.is_broken and not was_broken
        periodic = equipped and tick % self.save_interval_ticks == 0
        if broke_now or periodic:
            await self.store.save(self.ledger.snapshot())

        for listener in self.tick_listeners:
            try:
                result = listener(tick, report)
                if inspect.isawaitable(result):
                    await result
            except Exception as exc:  # pragma: no cover - diagnostic hook
                print(f"  [Analysis] Listener failed: {exc}")

        return report
