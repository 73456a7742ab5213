"""Follow the player round a storehouse, then watch the agent collect payment.

Runs a bundled scenario with no game client attached:

    uv run python examples/chase/run.py --ticks 20

Pay the debt part-way through by dropping coins after a given tick; the pile
despawns a few ticks later and the agent leaves:

    uv run python examples/chase/run.py --ticks 30 --pay-at 18

Pass `--json-ledger PATH` to keep the hook/debt counters between runs.
"""

from __future__ import annotations

import argparse
import asyncio
import random
from typing import Optional, Tuple

from tilechase import (
    FollowerController,
    FollowerSession,
    FollowerTickReport,
    InMemoryLedgerStore,
    JsonLedgerStore,
    ScenarioLoader,
    ScriptedEnvironment,
    WorldPoint,
    render_ascii_window,
)
from tilechase.config import Config
from tilechase.economy import DurabilityLedger, LedgerSnapshot


PILE_LIFETIME_TICKS = 5


def parse_args() -> argparse.Namespace:
    parser = argparse.ArgumentParser(description="Insurance agent follower demo")
    parser.add_argument("--scenario", default="harbour", help="Scenario name in examples/scenarios")
    parser.add_argument("--ticks", type=int, default=Config.DEFAULT_TICK_COUNT, help="Number of ticks to run")
    parser.add_argument("--seed", type=int, default=7, help="Seed for the agent's chatter")
    parser.add_argument("--radius", type=int, default=6, help="Radius of the ASCII view")
    parser.add_argument(
        "--pay-at",
        type=int,
        default=None,
        help="Tick after which the player drops enough coins to pay the debt",
    )
    parser.add_argument("--json-ledger", default=None, help="Persist the ledger to this JSON file")
    return parser.parse_args()


class ChaseView:
    """Tick listener that plays the player's coin drop and draws the scene."""

    def __init__(
        self,
        session: FollowerSession,
        environment: ScriptedEnvironment,
        *,
        num_ticks: int,
        radius: int,
        pay_at: Optional[int] = None,
    ):
        self.session = session
        self.environment = environment
        self.num_ticks = num_ticks
        self.radius = radius
        self.pay_at = pay_at
        # (amount, location, tick on which it despawns)
        self.pile: Optional[Tuple[int, WorldPoint, int]] = None

    async def __call__(self, tick: int, report: FollowerTickReport) -> None:
        print(f"\n=== Tick {tick}/{self.num_ticks} ===")
        self.draw(report)

        if self.pile is not None and tick == self.pile[2]:
            amount, location, _ = self.pile
            self.pile = None
            await self.session.pile_despawned(amount, location)

        if self.pay_at is not None and tick == self.pay_at:
            amount = self.session.ledger.total_repair_cost
            if self.session.drop_coins(amount):
                self.environment.coins -= amount
                self.pile = (amount, self.session.payments.location, tick + PILE_LIFETIME_TICKS)

    def draw(self, report: FollowerTickReport) -> None:
        markers = {}
        follower = self.session.controller.current_position
        if follower is not None:
            markers["follower"] = [follower]
        player = self.environment.player_position()
        if player is not None:
            markers["player"] = [player]
        if self.session.payments.location is not None:
            markers["payment"] = [self.session.payments.location]

        center = player or report.position
        if center is not None:
            print(render_ascii_window(self.environment.grid, center, radius=self.radius, markers=markers))
        if self.session.overhead is not None:
            print(f'  "{self.session.overhead.text}"')


async def main(args: argparse.Namespace) -> None:
    Config.validate()
    print(Config.display())

    scenario = ScenarioLoader().load(args.scenario)
    environment = ScriptedEnvironment(scenario)
    ledger = DurabilityLedger(snapshot=scenario.ledger or LedgerSnapshot())
    store = JsonLedgerStore(args.json_ledger) if args.json_ledger else InMemoryLedgerStore()

    session = FollowerSession(
        environment,
        controller=FollowerController(),
        ledger=ledger,
        store=store,
        rng=random.Random(args.seed),
    )
    view = ChaseView(
        session, environment, num_ticks=args.ticks, radius=args.radius, pay_at=args.pay_at
    )
    # Draw first, then move the player for the next tick.
    session.tick_listeners.extend([view, environment.advance])

    print(f"\nScenario: {scenario.name}")
    print(scenario.description)

    await session.run(args.ticks)

    print(f"\nDebt: {ledger.total_repair_cost} gp, lifetime paid: {ledger.lifetime_paid} gp")
    print(f"Hook time remaining: {ledger.smooth_time_remaining()}")


if __name__ == "__main__":
    args = parse_args()
    asyncio.run(main(args))
