import pytest

from adaptive_images.domain.entities.breakpoints import BreakpointSet
from adaptive_images.domain.services.breakpoint_selector import BreakpointSelector

BPS = BreakpointSet.of([1382, 992, 768, 480])


def test_breakpoints_sorted_regardless_of_config_order():
    assert BPS.widths == (480, 768, 992, 1382)
    assert BPS.minimum == 480
    assert BPS.maximum == 1382


def test_duplicates_collapse():
    assert BreakpointSet.of([768, 480, 768]).widths == (480, 768)


@pytest.mark.parametrize("widths", [[], [0, 480], [-1]])
def test_invalid_breakpoints_rejected(widths):
    with pytest.raises(ValueError):
        BreakpointSet.of(widths)


@pytest.mark.parametrize(
    "width,expected",
    [(1, 480), (480, 480), (481, 768), (600, 768), (768, 768), (1000, 1382), (1382, 1382)],
)
def test_select_smallest_breakpoint_at_least_width(width, expected):
    assert BreakpointSelector(BPS).select(width) == expected


def test_select_matches_minimal_qualifying_breakpoint():
    selector = BreakpointSelector(BPS)
    for w in range(1, 1600, 13):
        qualifying = [b for b in BPS.widths if b >= w]
        assert selector.select(w) == (min(qualifying) if qualifying else None)


def test_wider_than_every_breakpoint_is_use_source():
    assert BreakpointSelector(BPS).select(2000) is None


def test_resolve_default_raw_keeps_sentinel():
    assert BreakpointSelector(BPS).resolve(2000, default_raw=True) is None


def test_resolve_clamps_to_max_without_default_raw():
    assert BreakpointSelector(BPS).resolve(2000, default_raw=False) == 1382
    assert BreakpointSelector(BPS).resolve(600, default_raw=False) == 768
