from __future__ import annotations

import itertools
import random

import pytest

from adapters.layout.position_planner import (
    PlannerConfig,
    PositionPlanner,
    SizeCategory,
    exceeds_overlap,
    shuffle_in_place,
)
from domain.models import ImageDimensions, ProbedItem, Rect, Size
from tests.helpers.media_fixtures import make_items, seeded_planner

_ASPECTS = [(1600, 900), (900, 1600), (1000, 1000), (3000, 200), (200, 3000), (1200, 800)]


def _probed(count: int) -> list[ProbedItem]:
    return [
        ProbedItem(item=item, dimensions=ImageDimensions(*_ASPECTS[index % len(_ASPECTS)]))
        for index, item in enumerate(make_items(count))
    ]


@pytest.mark.parametrize("seed", [1, 2, 3, 11, 42])
def test_pairwise_overlap_stays_within_ratio(seed: int) -> None:
    plan = seeded_planner(seed).plan(_probed(30), Size(1200, 800))

    for first, second in itertools.combinations(plan.items, 2):
        allowed = min(first.rect.area, second.rect.area) * 0.15
        assert first.rect.intersection_area(second.rect) <= allowed + 1e-6


def test_three_items_are_placed_inside_bounds() -> None:
    plan = seeded_planner().plan(_probed(3), Size(1000, 800))

    assert sorted(item.item_id for item in plan.items) == ["img-0", "img-1", "img-2"]
    assert plan.bounds.width >= 1000
    assert plan.bounds.height >= 800
    for item in plan.items:
        assert item.width >= 100
        assert item.height >= 100
        assert item.x >= 0 and item.y >= 0
        assert item.x + item.width <= plan.bounds.width
        assert item.y + item.height <= plan.bounds.height


def test_empty_input_returns_viewport_bounds() -> None:
    plan = seeded_planner().plan([], Size(1024, 768))

    assert plan.items == []
    assert (plan.bounds.width, plan.bounds.height) == (1024, 768)


def test_largest_item_is_placed_first_at_start_offset() -> None:
    plan = seeded_planner(5).plan(_probed(8), Size(1200, 800))

    areas = [item.width * item.height for item in plan.items]
    assert areas == sorted(areas, reverse=True)
    assert (plan.items[0].x, plan.items[0].y) == (5, 5)


def test_same_seed_gives_same_plan() -> None:
    first = seeded_planner(9).plan(_probed(10), Size(1200, 800))
    second = seeded_planner(9).plan(_probed(10), Size(1200, 800))

    assert first == second


def test_base_z_indices_are_in_range() -> None:
    plan = seeded_planner(4).plan(_probed(20), Size(1200, 800))

    assert all(1 <= item.z_index <= 25 for item in plan.items)


@pytest.mark.parametrize(
    ("draw", "expected"),
    [
        (0.0, "showcase"),
        (0.15, "large"),
        (0.5, "medium"),
        (0.7, "small_medium"),
        (0.9, "accent"),
        (0.9999, "accent"),
    ],
)
def test_pick_category_uses_cumulative_weights(draw: float, expected: str) -> None:
    assert PositionPlanner().pick_category(draw).name == expected


@pytest.mark.parametrize("aspect", [20.0, 0.01])
def test_extreme_aspect_ratios_are_clamped(aspect: float) -> None:
    size = PositionPlanner().display_size(aspect, 100_000, 1_000)

    assert size.width >= 100
    assert size.height >= 100
    assert 0.25 - 1e-9 <= size.width / size.height <= 4 + 1e-9


def test_unplaceable_items_stack_below_existing_content() -> None:
    planner = PositionPlanner(PlannerConfig(random_attempts=0), rng=random.Random(2))

    plan = planner.plan(_probed(4), Size(10, 800))

    assert plan.items[0].y == 10
    for previous, current in zip(plan.items, plan.items[1:]):
        assert current.y == previous.y + previous.height + 10
    for item in plan.items:
        assert 5 <= item.x <= 105


def test_shuffle_in_place_is_a_permutation() -> None:
    values = list(range(12))

    shuffle_in_place(values, random.Random(6))

    assert sorted(values) == list(range(12))


def test_exceeds_overlap_uses_smaller_area() -> None:
    big = Rect(0, 0, 1000, 1000)
    small = Rect(0, 0, 100, 100)
    shifted = Rect(90, 0, 100, 100)

    assert exceeds_overlap(small, big, 0.15)
    assert not exceeds_overlap(shifted, Rect(180, 0, 100, 100), 0.15)


def test_invalid_config_is_rejected() -> None:
    with pytest.raises(ValueError, match="grid_step"):
        PlannerConfig(grid_step=0)
    with pytest.raises(ValueError, match="max_overlap_ratio"):
        PlannerConfig(max_overlap_ratio=1.0)


def test_category_weights_must_sum_to_one() -> None:
    categories = (
        SizeCategory("big", 0.5, 100_000, 200_000, 0.3),
        SizeCategory("small", 0.3, 40_000, 80_000, 0.1),
    )

    with pytest.raises(ValueError, match="weights must sum to 1"):
        PlannerConfig(size_categories=categories)


def test_pick_category_boundaries_follow_raw_weights() -> None:
    categories = (
        SizeCategory("half", 0.5, 100_000, 200_000, 0.3),
        SizeCategory("tenth", 0.1, 40_000, 80_000, 0.1),
        SizeCategory("rest", 0.4, 40_000, 80_000, 0.1),
    )
    planner = PositionPlanner(PlannerConfig(size_categories=categories))

    assert planner.pick_category(0.4999).name == "half"
    assert planner.pick_category(0.5).name == "tenth"
    assert planner.pick_category(1.0).name == "rest"
