from __future__ import annotations

import math

import pytest

from cargo_packer.engine import pack
from cargo_packer.geometry import boxes_overlap
from cargo_packer.models import BoxSpec, Container, PackingOptions, UnplacedReason

ALGORITHMS = ["layer", "best-fit", "constrained"]

MIXED_BOXES = [
    BoxSpec(id="A", length=40, width=30, height=20, quantity=6, weight=12),
    BoxSpec(id="B", length=25, width=25, height=25, quantity=5, weight=8),
    BoxSpec(id="C", length=60, width=20, height=15, quantity=4, weight=20, fragile=True),
    BoxSpec(id="D", length=10, width=10, height=50, quantity=7, weight=3, stackable=False),
    BoxSpec(id="E", length=90, width=90, height=90, quantity=1, weight=50),
]


def assert_within_container(container, placements):
    for p in placements:
        x1, y1, z1, x2, y2, z2 = p.bounds
        assert x1 >= 0 and y1 >= 0 and z1 >= 0
        assert x2 <= container.length
        assert y2 <= container.height
        assert z2 <= container.width


def assert_no_overlaps(placements):
    bounds = [p.bounds for p in placements]
    for i in range(len(bounds)):
        for j in range(i + 1, len(bounds)):
            assert not boxes_overlap(bounds[i], bounds[j])


def assert_conserved(boxes, result):
    requested = sum(b.quantity for b in boxes)
    assert result.placed_count + result.unplaced_count == requested


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_invariants_hold_for_every_strategy(algorithm):
    container = Container(length=120, width=80, height=100, max_weight=250)

    result = pack(container, MIXED_BOXES, PackingOptions(algorithm=algorithm))

    assert result.placed_count > 0
    assert_conserved(MIXED_BOXES, result)
    assert_within_container(container, result.placed_boxes)
    assert_no_overlaps(result.placed_boxes)


def test_constrained_respects_weight_limit():
    container = Container(length=120, width=80, height=100, max_weight=150)

    result = pack(container, MIXED_BOXES, PackingOptions(algorithm="constrained"))

    assert result.total_weight <= 150
    assert any(u.reason == UnplacedReason.WEIGHT_LIMIT for u in result.unplaced_boxes)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_same_input_gives_same_layout(algorithm):
    container = Container(length=120, width=80, height=100, max_weight=250)
    options = PackingOptions(algorithm=algorithm)

    first = pack(container, MIXED_BOXES, options)
    second = pack(container, MIXED_BOXES, options)

    assert first.placed_boxes == second.placed_boxes
    assert first.unplaced_boxes == second.unplaced_boxes


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_uniform_cubes_fill_a_larger_container(algorithm):
    boxes = [BoxSpec(length=10, width=10, height=10, quantity=20)]
    options = PackingOptions(algorithm=algorithm)

    unplaced = [
        pack(Container(length=s, width=s, height=s), boxes, options).unplaced_count
        for s in (10, 20, 100)
    ]

    assert unplaced == sorted(unplaced, reverse=True)
    assert unplaced[-1] == 0


def test_longer_container_can_leave_more_boxes_behind():
    """Greedy placement is not monotone in container size."""
    boxes = [
        BoxSpec(id="big", length=6, width=6, height=10, quantity=2),
        BoxSpec(id="small", length=2, width=5, height=10, quantity=3),
    ]
    options = PackingOptions(algorithm="layer")

    # Length 10: the second big box is skipped and two small ones take the rest of the row
    short = pack(Container(length=10, width=10, height=10), boxes, options)
    # Length 12: both big boxes fill the row and no small box fits the 4 deep strip behind
    long = pack(Container(length=12, width=10, height=10), boxes, options)

    assert short.unplaced_count == 2
    assert long.unplaced_count == 3


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_box_larger_than_container_is_unplaced(algorithm):
    container = Container(length=10, width=10, height=10)
    boxes = [BoxSpec(length=20, width=20, height=20, quantity=1)]

    result = pack(container, boxes, PackingOptions(algorithm=algorithm))

    assert result.placed_boxes == []
    assert result.unplaced_count == 1


def test_invalid_box_spec_is_reported_not_raised():
    container = Container(length=100, width=100, height=100)
    boxes = [
        BoxSpec(id="ok", length=10, width=10, height=10, quantity=2),
        BoxSpec(id="neg", length=-5, width=10, height=10, quantity=3),
        BoxSpec(id="nan", length=10, width=math.nan, height=10, quantity=1),
        BoxSpec(id="zero", length=10, width=10, height=10, quantity=0),
    ]

    result = pack(container, boxes)

    assert result.placed_count == 2
    invalid = {u.spec.id: u for u in result.unplaced_boxes}
    assert set(invalid) == {"neg", "nan", "zero"}
    assert all(u.reason == UnplacedReason.INVALID_INPUT for u in invalid.values())
    assert invalid["neg"].quantity == 3
    assert invalid["zero"].quantity == 0
    assert_conserved(boxes, result)


@pytest.mark.parametrize("algorithm", ALGORITHMS)
def test_infeasible_container_reports_everything_unplaced(algorithm):
    container = Container(length=100, width=-1, height=100)
    boxes = [BoxSpec(length=10, width=10, height=10, quantity=4)]

    result = pack(container, boxes, PackingOptions(algorithm=algorithm))

    assert result.placed_boxes == []
    assert len(result.unplaced_boxes) == 1
    assert result.unplaced_boxes[0].quantity == 4
    assert result.unplaced_boxes[0].reason == UnplacedReason.INVALID_CONTAINER
    assert result.volume_utilization == 0


def test_unplaced_units_are_aggregated_per_spec():
    container = Container(length=10, width=10, height=10)
    boxes = [BoxSpec(id="X", length=10, width=10, height=10, quantity=5)]

    result = pack(container, boxes, PackingOptions(algorithm="best-fit"))

    assert result.placed_count == 1
    assert len(result.unplaced_boxes) == 1
    assert result.unplaced_boxes[0].quantity == 4


def test_unit_ids_and_default_colors_are_deterministic():
    container = Container(length=100, width=100, height=100)
    boxes = [
        BoxSpec(id="A", length=10, width=10, height=10, quantity=2),
        BoxSpec(length=10, width=10, height=10, quantity=1, color="#000000"),
        BoxSpec(length=5, width=5, height=5, quantity=1),
    ]

    result = pack(container, boxes, PackingOptions(algorithm="layer"))

    assert [p.box_id for p in result.placed_boxes] == ["A_0001", "A_0002", "BOX2_0001", "BOX3_0001"]
    assert result.placed_boxes[0].color == result.placed_boxes[1].color
    assert result.placed_boxes[2].color == "#000000"


def test_injected_color_assigner():
    container = Container(length=100, width=100, height=100)
    boxes = [BoxSpec(length=10, width=10, height=10, quantity=2)]

    result = pack(
        container,
        boxes,
        PackingOptions(algorithm="best-fit"),
        color_assigner=lambda spec, index: f"color-{index}",
    )

    assert {p.color for p in result.placed_boxes} == {"color-0"}


def test_default_options_use_constrained_strategy():
    result = pack(Container(length=10, width=10, height=10), [])

    assert result.algorithm == "constrained"
    assert result.placed_boxes == []
    assert result.unplaced_boxes == []


def test_layer_rotation_is_off_by_default():
    assert PackingOptions(algorithm="layer").rotation_enabled() is False
    assert PackingOptions(algorithm="best-fit").rotation_enabled() is True
    assert PackingOptions(algorithm="constrained").rotation_enabled() is True
    assert PackingOptions(algorithm="best-fit", allow_rotation=False).rotation_enabled() is False
