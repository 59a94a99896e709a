"""Tests for cut list generation and the guillotine panel nester."""

from __future__ import annotations

from itertools import combinations

import pytest

from enclosures.domain.services import EnclosureDesigner
from enclosures.domain.value_objects import Panel, PanelType
from enclosures.infrastructure.panel_nesting import (
    NestingConfig,
    PanelNester,
    SheetConfig,
    UsageStats,
    _FreeSlot,
    _SheetState,
    generate_cut_list,
)


def nester(kerf: float = 0.0, width: float = 48.0, length: float = 96.0) -> PanelNester:
    return PanelNester(NestingConfig(sheet=SheetConfig(width, length), kerf=kerf))


class TestConfig:
    def test_defaults(self) -> None:
        config = NestingConfig()
        assert config.sheet.width == 48.0
        assert config.sheet.length == 96.0
        assert config.kerf == 0.125

    @pytest.mark.parametrize("kerf", [-0.1, 0.6])
    def test_kerf_bounds(self, kerf: float) -> None:
        with pytest.raises(ValueError, match="Kerf"):
            NestingConfig(kerf=kerf)

    def test_sheet_dimensions_must_be_positive(self) -> None:
        with pytest.raises(ValueError):
            SheetConfig(width=0)

    def test_admits_either_orientation(self) -> None:
        sheet = SheetConfig()
        assert sheet.admits(90.0, 40.0)
        assert not sheet.admits(50.0, 97.0)


class TestCutList:
    """Tests for cut list expansion and ordering."""

    def test_quantities_expand_with_labels(self) -> None:
        entries = generate_cut_list([Panel("Divider", 10.0, 10.0, quantity=3)])
        assert [e.label for e in entries] == [
            "Divider (1/3)",
            "Divider (2/3)",
            "Divider (3/3)",
        ]

    def test_single_panel_keeps_name(self) -> None:
        entries = generate_cut_list([Panel("Back Panel", 10.0, 10.0)])
        assert entries[0].label == "Back Panel"

    def test_sorted_by_area_descending_and_stable(self) -> None:
        panels = [
            Panel("Small", 5.0, 5.0),
            Panel("Wide", 20.0, 5.0),
            Panel("Square", 10.0, 10.0),
            Panel("Large", 30.0, 10.0),
        ]
        labels = [e.label for e in generate_cut_list(panels)]
        assert labels == ["Large", "Wide", "Square", "Small"]

    def test_entries_carry_panel_details(self) -> None:
        panel = Panel("Top", 36.0, 18.5, panel_type=PanelType.TOP, notes="glue")
        entry = generate_cut_list([panel])[0]
        assert entry.panel_type == PanelType.TOP
        assert entry.notes == "glue"
        assert entry.area == pytest.approx(36.0 * 18.5)


class TestNesting:
    def test_empty_panel_list(self) -> None:
        result = nester().nest([])
        assert result.sheet_count == 0
        assert result.unplaced == ()
        assert result.usage.efficiency_percent == 0.0

    def test_two_halves_fill_one_sheet(self) -> None:
        result = nester().nest([Panel("Half", 48.0, 48.0, quantity=2)])

        assert result.sheet_count == 1
        placements = result.layouts[0].placements
        assert [(p.x, p.y) for p in placements] == [(0.0, 0.0), (0.0, 48.0)]
        assert result.usage.efficiency_percent == pytest.approx(100.0)

    def test_longest_side_placed_first(self) -> None:
        panels = [Panel("Small", 10.0, 10.0), Panel("Long", 40.0, 80.0)]
        result = nester().nest(panels)
        assert result.layouts[0].placements[0].label == "Long"

    def test_rotates_when_only_rotated_fits(self) -> None:
        result = nester().nest([Panel("Strip", 90.0, 10.0)])
        placed = result.layouts[0].placements[0]
        assert placed.rotated
        assert (placed.width, placed.height) == (10.0, 90.0)

    def test_kerf_pads_each_piece(self) -> None:
        result = nester(kerf=0.125).nest([Panel("Piece", 10.0, 20.0)])
        placed = result.layouts[0].placements[0]
        assert (placed.width, placed.height) == (10.125, 20.125)
        assert (placed.cut_width, placed.cut_height) == (10.0, 20.0)

    def test_oversized_panel_is_reported_not_raised(self) -> None:
        panels = [Panel("Huge", 50.0, 100.0), Panel("Fine", 20.0, 20.0)]
        result = nester().nest(panels)

        assert [u.label for u in result.unplaced] == ["Huge"]
        assert "doesn't fit" in result.unplaced[0].message
        assert result.total_pieces_placed == 1

    def test_full_sheet_panel_fails_once_kerf_added(self) -> None:
        result = nester(kerf=0.125).nest([Panel("Sheet", 48.0, 96.0)])
        assert result.sheet_count == 0
        assert len(result.unplaced) == 1

    def test_opens_new_sheet_when_full(self) -> None:
        result = nester().nest([Panel("Big", 40.0, 90.0, quantity=3)])
        assert result.sheet_count == 3
        assert [layout.sheet_index for layout in result.layouts] == [0, 1, 2]

    def test_small_pieces_backfill_earlier_sheet(self) -> None:
        panels = [Panel("Big", 40.0, 90.0, quantity=2), Panel("Strip", 6.0, 80.0)]
        result = nester().nest(panels)
        assert result.sheet_count == 2
        assert result.layouts[0].placements[-1].label == "Strip"

    def test_deterministic(self, make_config) -> None:
        designer = EnclosureDesigner()
        config = make_config(topology="ported", tuning_frequency=32.0, extra_bracing=True)
        panels = designer.generate_panels(config, designer.design(config))

        first = PanelNester().nest(panels)
        second = PanelNester().nest(panels)
        assert first == second


def merge_slots(
    *slots: tuple[float, float, float, float], tolerance: float = 0.01
) -> list[tuple[int, float, float, float, float]]:
    """Run the free-space merge over seeded slots; return live (index, x, y, w, h)."""
    sheet = _SheetState(0, SheetConfig(), free=[_FreeSlot(*slot) for slot in slots])
    PanelNester(NestingConfig(merge_tolerance=tolerance))._merge(sheet)
    return [
        (i, slot.x, slot.y, slot.width, slot.height)
        for i, slot in enumerate(sheet.free)
        if slot.alive
    ]


class TestFreeRectangleMerge:
    """Tests for merging adjacent free rectangles."""

    def test_horizontal_neighbours_merge(self) -> None:
        assert merge_slots((0, 0, 10, 20), (10, 0, 15, 20)) == [(0, 0, 0, 25, 20)]

    def test_vertical_neighbours_merge(self) -> None:
        assert merge_slots((5, 30, 12, 8), (5, 0, 12, 30)) == [(0, 5, 0, 12, 38)]

    def test_lower_index_absorbs_and_merging_repeats(self) -> None:
        merged = merge_slots((20, 0, 10, 5), (0, 0, 10, 5), (10, 0, 10, 5))
        assert merged == [(0, 0, 0, 30, 5)]

    def test_gap_within_tolerance_merges(self) -> None:
        merged = merge_slots((0, 0, 10, 20), (10.005, 0, 15, 20.004))
        assert len(merged) == 1
        index, x, y, width, height = merged[0]
        assert (index, x, y) == (0, 0, 0)
        assert width == pytest.approx(25.0)
        assert height == 20

    @pytest.mark.parametrize(
        "second",
        [
            (10.05, 0, 15, 20),
            (10, 0, 15, 19.9),
            (10, 0.5, 15, 20),
        ],
    )
    def test_misaligned_rectangles_stay_separate(
        self, second: tuple[float, float, float, float]
    ) -> None:
        merged = merge_slots((0, 0, 10, 20), second)
        assert [m[0] for m in merged] == [0, 1]

    def test_zero_tolerance_requires_exact_edges(self) -> None:
        assert len(merge_slots((0, 0, 10, 20), (10.005, 0, 15, 20), tolerance=0.0)) == 2


class TestLayoutInvariants:
    """Geometric checks over a realistic mixed panel set."""

    @pytest.fixture
    def result(self):
        panels = [
            Panel("Front", 36.0, 15.0),
            Panel("Back", 36.0, 15.0),
            Panel("Top", 36.0, 18.5, quantity=2),
            Panel("Side", 18.5, 13.5, quantity=2),
            Panel("Divider", 18.5, 13.5, quantity=3),
            Panel("Port Wall", 52.3, 4.2),
            Panel("Cap", 9.0, 4.2),
        ]
        return nester(kerf=0.125).nest(panels)

    def test_no_overlaps_within_a_sheet(self, result) -> None:
        for layout in result.layouts:
            for a, b in combinations(layout.placements, 2):
                assert not a.overlaps(b), f"{a.label} overlaps {b.label}"

    def test_placements_inside_sheet(self, result) -> None:
        for layout in result.layouts:
            sheet = layout.sheet_config
            for p in layout.placements:
                assert p.right_edge <= sheet.width + 1e-9
                assert p.top_edge <= sheet.length + 1e-9

    def test_used_area_bounded_by_sheet_area(self, result) -> None:
        for layout in result.layouts:
            assert layout.used_area <= layout.sheet_config.area
        assert result.usage.used_area <= result.usage.total_area

    def test_every_piece_accounted_for(self, result) -> None:
        assert result.total_pieces_placed + len(result.unplaced) == 11

    def test_free_space_disjoint_from_placements(self, result) -> None:
        for layout in result.layouts:
            for free in layout.free_rectangles:
                for p in layout.placements:
                    separated = (
                        free.x >= p.right_edge - 1e-9
                        or p.x >= free.x + free.width - 1e-9
                        or free.y >= p.top_edge - 1e-9
                        or p.y >= free.y + free.height - 1e-9
                    )
                    assert separated


class TestUsageStats:
    def test_square_foot_conversions(self) -> None:
        usage = UsageStats(sheet_count=2, sheet_area=4608.0, used_area=4608.0)
        assert usage.total_area_sqft == pytest.approx(64.0)
        assert usage.used_area_sqft == pytest.approx(32.0)
        assert usage.waste_area_sqft == pytest.approx(32.0)
        assert usage.efficiency_percent == pytest.approx(50.0)
