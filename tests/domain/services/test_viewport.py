from __future__ import annotations

from domain.models import CanvasBounds, Point, Size
from domain.services.canvas_bounds import CanvasBoundsManager
from domain.services.viewport import Viewport


def _viewport(scroll: Point = Point(0, 0)) -> Viewport:
    bounds = CanvasBoundsManager(CanvasBounds(3000, 2000))
    return Viewport(Size(1000, 800), bounds, origin=Point(20, 10), scroll=scroll)


def test_canvas_point_compensates_origin_and_scroll() -> None:
    viewport = _viewport(Point(300, 200))

    assert viewport.to_viewport(Point(120, 60)) == Point(100, 50)
    assert viewport.to_canvas(Point(120, 60)) == Point(400, 250)


def test_scroll_is_clamped_to_bounds() -> None:
    viewport = _viewport()

    assert viewport.scroll_to(-50, 99999) == Point(0, 1200)
    assert viewport.max_scroll == Point(2000, 1200)


def test_scroll_by_reports_applied_delta() -> None:
    viewport = _viewport(Point(1990, 0))

    delta = viewport.scroll_by(20, -20)

    assert delta == Point(10, 0)
    assert viewport.scroll == Point(2000, 0)


def test_resize_reclamps_scroll() -> None:
    viewport = _viewport(Point(2000, 1200))

    viewport.resize(Size(1500, 1000))

    assert viewport.scroll == Point(1500, 1000)
