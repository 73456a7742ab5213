"""Tests for hook wear, debt accrual and coin-pile payments."""

from tilechase.economy import (
    DurabilityLedger,
    LedgerSnapshot,
    NoticeKind,
    PaymentOutcome,
    PaymentTracker,
)
from tilechase.environment import WorldPoint


class FakeClock:
    def __init__(self, now: float = 0.0):
        self.now = now

    def __call__(self) -> float:
        return self.now


def make_ledger(**kwargs) -> DurabilityLedger:
    params = dict(
        durability_ticks=3,
        repair_cost=100,
        penalty_per_second=10,
        tick_length_ms=600,
        clock=FakeClock(),
    )
    params.update(kwargs)
    return DurabilityLedger(**params)


def test_hook_breaks_and_charges_repair_then_penalty():
    ledger = make_ledger()

    ledger.on_tick(True)
    ledger.on_tick(True)
    assert not ledger.is_broken
    assert ledger.debt == 0

    ledger.on_tick(True)
    assert ledger.is_broken
    assert ledger.debt == 100
    notices = ledger.drain_notices()
    assert [n.kind for n in notices] == [NoticeKind.WARNING]
    assert "broken" in notices[0].text

    # 10 gp/s over a 0.6 s tick rounds up to 6.
    ledger.on_tick(True)
    assert ledger.debt == 106
    assert ledger.drain_notices() == []


def test_unequipped_hook_does_not_wear():
    ledger = make_ledger()

    changed = ledger.on_tick(False)

    assert changed is False
    assert ledger.wear_ticks == 0
    assert ledger.lifetime_worn == 0


def test_accrued_cost_is_the_worn_share_until_broken():
    ledger = make_ledger(durability_ticks=4)
    ledger.on_tick(True)

    assert ledger.accrued_cost == 25
    assert ledger.current_durability == 3


def test_smooth_time_remaining_formats_and_counts_down():
    clock = FakeClock(0.0)
    ledger = make_ledger(durability_ticks=200, clock=clock)
    ledger.on_tick(False)

    # 200 ticks * 0.6 s = 120 s; 400 ms into the tick leaves 119.6 s.
    assert ledger.smooth_time_remaining(now=400) == "01:59"
    # The sub-tick correction is capped at one tick.
    assert ledger.smooth_time_remaining(now=60_000) == "01:59"

    long_lived = make_ledger(durability_ticks=10_000, clock=clock)
    assert long_lived.smooth_time_remaining(now=0) == "1:40:00"

    worn_out = make_ledger(snapshot=LedgerSnapshot(wear_ticks=3, debt=100))
    assert worn_out.smooth_time_remaining(now=0) == "00:00"


def test_settle_debt_clears_and_records_lifetime():
    ledger = make_ledger(snapshot=LedgerSnapshot(wear_ticks=5, debt=250, lifetime_paid=10))

    paid = ledger.settle_debt()

    assert paid == 250
    assert ledger.debt == 0
    assert ledger.lifetime_paid == 260
    assert not ledger.has_unpaid_debt
    assert ledger.drain_notices()[0].kind is NoticeKind.SUCCESS


def test_restore_recomputes_broken_state():
    ledger = make_ledger(snapshot=LedgerSnapshot(wear_ticks=3, debt=100))

    assert ledger.is_broken
    assert ledger.snapshot() == LedgerSnapshot(wear_ticks=3, debt=100)

    # Already broken: no second repair charge on the next tick.
    ledger.on_tick(True)
    assert ledger.debt == 106


def test_repair_resets_wear():
    ledger = make_ledger(snapshot=LedgerSnapshot(wear_ticks=3, debt=0))

    ledger.repair()

    assert not ledger.is_broken
    assert ledger.wear_ticks == 0
    assert ledger.current_durability == 3


def broken_ledger() -> DurabilityLedger:
    return make_ledger(snapshot=LedgerSnapshot(wear_ticks=3, debt=100))


def test_drop_requires_debt_and_enough_coins():
    healthy = PaymentTracker(make_ledger())
    assert not healthy.drop_coins(500, WorldPoint(x=1, y=1))

    tracker = PaymentTracker(broken_ledger())
    assert not tracker.drop_coins(99, WorldPoint(x=1, y=1))
    assert not tracker.is_tracking

    assert tracker.drop_coins(100, WorldPoint(x=1, y=1))
    assert tracker.is_tracking
    assert tracker.location == WorldPoint(x=1, y=1)
    assert "counting" in tracker.ledger.drain_notices()[0].text


def test_unrelated_pile_is_ignored():
    tracker = PaymentTracker(broken_ledger())
    tracker.drop_coins(100, WorldPoint(x=1, y=1))

    assert tracker.pile_despawned(100, WorldPoint(x=2, y=1), 0) is PaymentOutcome.IGNORED
    assert tracker.pile_despawned(50, WorldPoint(x=1, y=1), 0) is PaymentOutcome.IGNORED
    assert tracker.is_tracking

    idle = PaymentTracker(broken_ledger())
    assert idle.pile_despawned(100, WorldPoint(x=1, y=1), 0) is PaymentOutcome.IGNORED


def test_picking_the_pile_back_up_is_fraud():
    ledger = broken_ledger()
    tracker = PaymentTracker(ledger)
    tracker.note_inventory_coins(0)
    tracker.drop_coins(100, WorldPoint(x=1, y=1))

    outcome = tracker.pile_despawned(100, WorldPoint(x=1, y=1), inventory_coins=100)

    assert outcome is PaymentOutcome.FRAUD
    assert ledger.debt == 100
    assert not tracker.is_tracking
    assert ledger.drain_notices()[-1].kind is NoticeKind.WARNING


def test_despawned_pile_settles_the_debt():
    ledger = broken_ledger()
    tracker = PaymentTracker(ledger)
    tracker.note_inventory_coins(0)
    tracker.drop_coins(100, WorldPoint(x=1, y=1))

    outcome = tracker.pile_despawned(100, WorldPoint(x=1, y=1), inventory_coins=0)

    assert outcome is PaymentOutcome.SETTLED
    assert ledger.debt == 0
    assert ledger.lifetime_paid == 100
    assert not tracker.is_tracking
