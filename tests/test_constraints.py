"""Tests for the placement constraints, checked on hand-built loads."""

from __future__ import annotations

from cargo_packer.models import BoxSpec
from cargo_packer.packing.constraints import (
    Candidate,
    LoadState,
    SupportConstraint,
    WeightConstraint,
)
from cargo_packer.packing.units import Unit


def unit(box_id: str = "U", **spec) -> Unit:
    spec.setdefault("length", 10)
    spec.setdefault("width", 10)
    spec.setdefault("height", 10)
    return Unit(box_id=box_id, spec_index=0, spec=BoxSpec(**spec), color=None)


def load(*boxes) -> LoadState:
    state = LoadState()
    for u, x, y, z, dims in boxes:
        state.commit(u.place(x, y, z, dims))
    return state


def test_floor_needs_no_support() -> None:
    candidate = Candidate(unit(), 0.0, 0.0, 0.0, (10.0, 10.0, 10.0))

    assert SupportConstraint().check(candidate, LoadState()) is True


def test_floating_box_is_unsupported() -> None:
    """Above the floor with nothing underneath."""
    candidate = Candidate(unit(), 0.0, 10.0, 0.0, (10.0, 10.0, 10.0))

    assert SupportConstraint().check(candidate, LoadState()) is False


def test_gap_between_boxes_is_unsupported() -> None:
    state = load((unit("base"), 0.0, 0.0, 0.0, (10.0, 10.0, 10.0)))
    candidate = Candidate(unit(), 0.0, 12.0, 0.0, (10.0, 10.0, 10.0))

    assert SupportConstraint().check(candidate, state) is False


def test_every_supporter_must_accept_the_load() -> None:
    state = load(
        (unit("ok", stackable=True), 0.0, 0.0, 0.0, (5.0, 10.0, 10.0)),
        (unit("flat", stackable=False), 5.0, 0.0, 0.0, (5.0, 10.0, 10.0)),
    )
    support = SupportConstraint()

    # Spanning both boxes puts weight on the non-stackable one
    spanning = Candidate(unit(), 0.0, 10.0, 0.0, (10.0, 5.0, 10.0))
    assert len(support.supporters(spanning, state)) == 2
    assert support.check(spanning, state) is False

    # Resting on the stackable box alone is fine; touching x = 5 is not overlap
    on_ok = Candidate(unit(), 0.0, 10.0, 0.0, (5.0, 5.0, 10.0))
    assert [p.box_id for p in support.supporters(on_ok, state)] == ["ok"]
    assert support.check(on_ok, state) is True


def test_top_face_matches_within_tolerance() -> None:
    # 0.1 + 0.2 != 0.3 in floating point
    state = load((unit("thin", height=0.2), 0.0, 0.1, 0.0, (10.0, 0.2, 10.0)))
    candidate = Candidate(unit(), 0.0, 0.3, 0.0, (10.0, 10.0, 10.0))

    assert state.placed[0].top != 0.3
    assert SupportConstraint().check(candidate, state) is True


def test_fragile_rule_can_be_disabled() -> None:
    state = load((unit("light", weight=1), 0.0, 0.0, 0.0, (10.0, 10.0, 10.0)))
    candidate = Candidate(unit(weight=10, fragile=True), 0.0, 10.0, 0.0, (10.0, 5.0, 10.0))

    assert SupportConstraint(respect_fragility=True).check(candidate, state) is False
    assert SupportConstraint(respect_fragility=False).check(candidate, state) is True


def test_zero_max_stack_weight_is_a_limit() -> None:
    state = load((unit("base", max_stack_weight=0), 0.0, 0.0, 0.0, (10.0, 10.0, 10.0)))
    support = SupportConstraint()

    weightless = Candidate(unit(weight=0), 0.0, 10.0, 0.0, (10.0, 5.0, 10.0))
    heavy = Candidate(unit(weight=1), 0.0, 10.0, 0.0, (10.0, 5.0, 10.0))

    assert support.check(weightless, state) is True
    assert support.check(heavy, state) is False


def test_weight_constraint_counts_the_running_load() -> None:
    state = load((unit("first", weight=60), 0.0, 0.0, 0.0, (10.0, 10.0, 10.0)))
    constraint = WeightConstraint(100.0)

    assert constraint.check(Candidate(unit(weight=40), 10.0, 0.0, 0.0, (10.0, 10.0, 10.0)), state) is True
    assert constraint.check(Candidate(unit(weight=41), 10.0, 0.0, 0.0, (10.0, 10.0, 10.0)), state) is False
