"""Sheet nesting data models and the guillotine nesting algorithm.

This module lays enclosure panels onto stock sheets using a first-fit
decreasing guillotine heuristic and reports material usage.

Each panel instance is padded by the blade kerf, the padded rectangles are
sorted by their larger dimension, and each is placed into the free
rectangle (on the earliest sheet that admits it) that leaves the least
L-shaped waste. The consumed free rectangle is split by one guillotine cut
and adjacent free rectangles are merged back together.

All result dataclasses are frozen (immutable); only the internal sheet
state is mutated, and only for the duration of one nesting run.
"""

from __future__ import annotations

import logging
from collections import deque
from dataclasses import dataclass, field
from typing import Sequence

from enclosures.domain.value_objects import (
    SQUARE_INCHES_PER_SQUARE_FOOT,
    CircularCutout,
    Panel,
    PanelType,
)

logger = logging.getLogger(__name__)


@dataclass(frozen=True)
class SheetConfig:
    """Stock sheet dimensions.

    Attributes:
        width: Sheet width in inches (default 48.0 for 4' sheets).
        length: Sheet length in inches (default 96.0 for 8' sheets).
    """

    width: float = 48.0
    length: float = 96.0

    def __post_init__(self) -> None:
        if self.width <= 0:
            raise ValueError("Sheet width must be positive")
        if self.length <= 0:
            raise ValueError("Sheet length must be positive")

    @property
    def area(self) -> float:
        """Sheet area in square inches."""
        return self.width * self.length

    def admits(self, width: float, height: float) -> bool:
        """True if a rectangle fits an empty sheet in either orientation."""
        return (width <= self.width and height <= self.length) or (
            height <= self.width and width <= self.length
        )


@dataclass(frozen=True)
class NestingConfig:
    """Configuration for panel nesting.

    Attributes:
        enabled: Whether nesting runs at all.
        sheet: Stock sheet dimensions.
        kerf: Saw blade kerf in inches (default 1/8").
        merge_tolerance: Distance treated as equal when merging free space.
    """

    enabled: bool = True
    sheet: SheetConfig = field(default_factory=SheetConfig)
    kerf: float = 0.125
    merge_tolerance: float = 0.01

    def __post_init__(self) -> None:
        if not 0 <= self.kerf <= 0.5:
            raise ValueError("Kerf must be between 0 and 0.5 inches")
        if self.merge_tolerance < 0:
            raise ValueError("Merge tolerance must be non-negative")


@dataclass(frozen=True)
class CutListEntry:
    """One physical piece to cut, expanded from a panel's quantity."""

    label: str
    width: float
    height: float
    panel_type: PanelType
    cutouts: tuple[CircularCutout, ...] = ()
    notes: str | None = None

    @property
    def area(self) -> float:
        return self.width * self.height


def generate_cut_list(panels: Sequence[Panel]) -> list[CutListEntry]:
    """Expand panels into individual pieces, largest area first.

    Pieces from a panel with quantity N are labelled "Name (i/N)". Pieces of
    equal area keep their panel order.
    """
    entries = [
        CutListEntry(
            label=label,
            width=panel.width,
            height=panel.height,
            panel_type=panel.panel_type,
            cutouts=panel.cutouts,
            notes=panel.notes,
        )
        for panel, label in _expand(panels)
    ]
    return sorted(entries, key=lambda e: -e.area)


def _expand(panels: Sequence[Panel]) -> list[tuple[Panel, str]]:
    expanded: list[tuple[Panel, str]] = []
    for panel in panels:
        for i in range(panel.quantity):
            label = panel.name
            if panel.quantity > 1:
                label = f"{panel.name} ({i + 1}/{panel.quantity})"
            expanded.append((panel, label))
    return expanded


@dataclass(frozen=True)
class FreeRectangle:
    """An empty region of a sheet available for placement."""

    x: float
    y: float
    width: float
    height: float

    @property
    def area(self) -> float:
        return self.width * self.height


@dataclass(frozen=True)
class PlacedPanel:
    """A panel instance placed at a specific position on a sheet.

    ``width`` and ``height`` are the kerf-padded extents as placed, already
    swapped when the panel is rotated.

    Attributes:
        label: Instance label, e.g. "Chamber Divider (2/3)".
        panel: The panel this instance was cut from.
        x: Horizontal position from the sheet's left edge in inches.
        y: Vertical position from the sheet's bottom edge in inches.
        width: Placed width including kerf.
        height: Placed height including kerf.
        rotated: True if rotated 90 degrees from the panel's orientation.
        kerf: Kerf padding included in width and height.
    """

    label: str
    panel: Panel
    x: float
    y: float
    width: float
    height: float
    rotated: bool = False
    kerf: float = 0.0

    def __post_init__(self) -> None:
        if self.x < 0 or self.y < 0:
            raise ValueError("Position coordinates must be non-negative")

    @property
    def right_edge(self) -> float:
        return self.x + self.width

    @property
    def top_edge(self) -> float:
        return self.y + self.height

    @property
    def area(self) -> float:
        return self.width * self.height

    @property
    def cut_width(self) -> float:
        """Finished width along the sheet's x axis, without kerf."""
        return self.width - self.kerf

    @property
    def cut_height(self) -> float:
        """Finished height along the sheet's y axis, without kerf."""
        return self.height - self.kerf

    def overlaps(self, other: PlacedPanel, tolerance: float = 1e-9) -> bool:
        """True if the two placements share interior area."""
        return (
            self.x < other.right_edge - tolerance
            and other.x < self.right_edge - tolerance
            and self.y < other.top_edge - tolerance
            and other.y < self.top_edge - tolerance
        )


@dataclass(frozen=True)
class SheetLayout:
    """Layout of panels on a single sheet.

    Attributes:
        sheet_index: Zero-based index of this sheet in the nesting result.
        sheet_config: Dimensions of the sheet.
        placements: Placed panels in placement order.
        free_rectangles: Free space left after the last placement.
        used_area: Kerf-padded area of all placements in square inches.
    """

    sheet_index: int
    sheet_config: SheetConfig
    placements: tuple[PlacedPanel, ...]
    free_rectangles: tuple[FreeRectangle, ...] = ()
    used_area: float = 0.0

    def __post_init__(self) -> None:
        if self.sheet_index < 0:
            raise ValueError("Sheet index must be non-negative")

    @property
    def efficiency_percent(self) -> float:
        return self.used_area / self.sheet_config.area * 100

    @property
    def piece_count(self) -> int:
        return len(self.placements)


@dataclass(frozen=True)
class UnplaceablePanel:
    """Warning for a panel instance larger than an empty sheet."""

    label: str
    width: float
    height: float
    message: str


@dataclass(frozen=True)
class UsageStats:
    """Aggregate material usage across all sheets.

    Areas are in square inches unless the attribute says otherwise.
    """

    sheet_count: int
    sheet_area: float
    used_area: float

    @property
    def total_area(self) -> float:
        return self.sheet_count * self.sheet_area

    @property
    def waste_area(self) -> float:
        return self.total_area - self.used_area

    @property
    def total_area_sqft(self) -> float:
        return self.total_area / SQUARE_INCHES_PER_SQUARE_FOOT

    @property
    def used_area_sqft(self) -> float:
        return self.used_area / SQUARE_INCHES_PER_SQUARE_FOOT

    @property
    def waste_area_sqft(self) -> float:
        return self.waste_area / SQUARE_INCHES_PER_SQUARE_FOOT

    @property
    def efficiency_percent(self) -> float:
        if self.total_area == 0:
            return 0.0
        return self.used_area / self.total_area * 100


@dataclass(frozen=True)
class NestingResult:
    """Complete result of a nesting run.

    Attributes:
        layouts: One layout per opened sheet, in opening order.
        unplaced: Warnings for panels too large for any sheet.
        usage: Aggregate usage statistics.
    """

    layouts: tuple[SheetLayout, ...]
    unplaced: tuple[UnplaceablePanel, ...]
    usage: UsageStats

    @property
    def sheet_count(self) -> int:
        return len(self.layouts)

    @property
    def total_pieces_placed(self) -> int:
        return sum(layout.piece_count for layout in self.layouts)


@dataclass
class _Piece:
    """Internal kerf-padded rectangle awaiting placement."""

    label: str
    panel: Panel
    width: float
    height: float

    @property
    def longest_side(self) -> float:
        return max(self.width, self.height)


@dataclass
class _FreeSlot:
    """Arena entry for a free rectangle; dead slots are skipped."""

    x: float
    y: float
    width: float
    height: float
    alive: bool = True


@dataclass
class _SheetState:
    """Internal state for a sheet during nesting.

    Free rectangles live in an append-only arena. Consumed or merged
    rectangles are marked dead rather than removed, so indices stay valid
    while the merge worklist runs.
    """

    index: int
    sheet_config: SheetConfig
    placements: list[PlacedPanel] = field(default_factory=list)
    free: list[_FreeSlot] = field(default_factory=list)
    used_area: float = 0.0

    def __post_init__(self) -> None:
        if not self.free:
            self.free.append(
                _FreeSlot(0.0, 0.0, self.sheet_config.width, self.sheet_config.length)
            )

    def live_slots(self) -> list[int]:
        return [i for i, slot in enumerate(self.free) if slot.alive]

    def to_layout(self) -> SheetLayout:
        return SheetLayout(
            sheet_index=self.index,
            sheet_config=self.sheet_config,
            placements=tuple(self.placements),
            free_rectangles=tuple(
                FreeRectangle(s.x, s.y, s.width, s.height) for s in self.free if s.alive
            ),
            used_area=self.used_area,
        )


class PanelNester:
    """First-fit decreasing guillotine nesting onto fixed-size sheets.

    Placement is fully deterministic: the same panel list in the same order
    always yields the same layouts.

    Attributes:
        config: Nesting configuration (sheet size, kerf, merge tolerance).
    """

    def __init__(self, config: NestingConfig | None = None) -> None:
        """Initialize the nester.

        Args:
            config: Nesting configuration. Defaults to 4'x8' sheets with a
                1/8" kerf.
        """
        self.config = config or NestingConfig()

    def nest(self, panels: Sequence[Panel]) -> NestingResult:
        """Nest panels onto as few sheets as the heuristic finds.

        Args:
            panels: Panels to cut; quantities are expanded to instances.

        Returns:
            NestingResult with per-sheet layouts, unplaceable panel warnings
            and usage statistics. Oversized panels never abort the run.
        """
        sheet_config = self.config.sheet
        pieces = self._sort_by_longest_side(self._expand_pieces(panels))

        logger.debug(
            "Nesting %d pieces onto %gx%g sheets",
            len(pieces),
            sheet_config.width,
            sheet_config.length,
        )

        sheets: list[_SheetState] = []
        unplaced: list[UnplaceablePanel] = []

        for piece in pieces:
            if self._place_on_existing(piece, sheets):
                continue

            if not sheet_config.admits(piece.width, piece.height):
                warning = UnplaceablePanel(
                    label=piece.label,
                    width=piece.width,
                    height=piece.height,
                    message=(
                        f"Panel '{piece.label}' ({piece.width:.3f}\" x {piece.height:.3f}\") "
                        f"doesn't fit on a {sheet_config.width:g}\" x "
                        f"{sheet_config.length:g}\" sheet"
                    ),
                )
                logger.warning(warning.message)
                unplaced.append(warning)
                continue

            sheet = _SheetState(index=len(sheets), sheet_config=sheet_config)
            sheets.append(sheet)
            self._place_on_sheet(piece, sheet)

        layouts = tuple(sheet.to_layout() for sheet in sheets)
        for layout in layouts:
            logger.debug(
                "Sheet %d: %d pieces, %.1f%% used",
                layout.sheet_index,
                layout.piece_count,
                layout.efficiency_percent,
            )

        usage = UsageStats(
            sheet_count=len(layouts),
            sheet_area=sheet_config.area,
            used_area=sum(layout.used_area for layout in layouts),
        )
        logger.info(
            "Nested %d pieces on %d sheets (%.1f%% efficiency, %d unplaced)",
            sum(layout.piece_count for layout in layouts),
            usage.sheet_count,
            usage.efficiency_percent,
            len(unplaced),
        )
        return NestingResult(layouts=layouts, unplaced=tuple(unplaced), usage=usage)

    def _expand_pieces(self, panels: Sequence[Panel]) -> list[_Piece]:
        """Expand panel quantities into kerf-padded pieces."""
        kerf = self.config.kerf
        return [
            _Piece(
                label=label,
                panel=panel,
                width=panel.width + kerf,
                height=panel.height + kerf,
            )
            for panel, label in _expand(panels)
        ]

    def _sort_by_longest_side(self, pieces: list[_Piece]) -> list[_Piece]:
        """Sort by larger dimension, descending; ties keep input order."""
        return sorted(pieces, key=lambda p: -p.longest_side)

    def _place_on_existing(self, piece: _Piece, sheets: list[_SheetState]) -> bool:
        """Place on the earliest sheet with room, if any."""
        for sheet in sheets:
            if self._place_on_sheet(piece, sheet):
                return True
        return False

    def _place_on_sheet(self, piece: _Piece, sheet: _SheetState) -> bool:
        """Place a piece in the sheet's lowest-waste free rectangle.

        Both orientations are scored for every free rectangle in arena order;
        only a strictly lower waste replaces the current best, so the first
        best candidate wins ties and normal orientation wins over rotated.
        """
        best: tuple[int, bool] | None = None
        best_waste = float("inf")

        for i in sheet.live_slots():
            slot = sheet.free[i]
            for rotated in (False, True):
                w, h = (piece.height, piece.width) if rotated else (piece.width, piece.height)
                if w <= slot.width and h <= slot.height:
                    waste = (slot.width - w) * slot.height + (slot.height - h) * w
                    if waste < best_waste:
                        best_waste = waste
                        best = (i, rotated)

        if best is None:
            return False

        index, rotated = best
        slot = sheet.free[index]
        w, h = (piece.height, piece.width) if rotated else (piece.width, piece.height)
        placement = PlacedPanel(
            label=piece.label,
            panel=piece.panel,
            x=slot.x,
            y=slot.y,
            width=w,
            height=h,
            rotated=rotated,
            kerf=self.config.kerf,
        )
        sheet.placements.append(placement)
        sheet.used_area += placement.area

        if rotated:
            logger.debug(
                "Piece '%s' placed rotated at (%s, %s) on sheet %d",
                piece.label,
                slot.x,
                slot.y,
                sheet.index,
            )

        self._split(sheet, index, w, h)
        self._merge(sheet)
        return True

    def _split(self, sheet: _SheetState, index: int, width: float, height: float) -> None:
        """Guillotine-split a consumed free rectangle.

        The right remainder spans the full height of the original rectangle;
        the top remainder spans only the placed width. Remainders no larger
        than the kerf are discarded.
        """
        slot = sheet.free[index]
        slot.alive = False
        kerf = self.config.kerf

        if slot.width - width > kerf:
            sheet.free.append(
                _FreeSlot(slot.x + width, slot.y, slot.width - width, slot.height)
            )
        if slot.height - height > kerf:
            sheet.free.append(
                _FreeSlot(slot.x, slot.y + height, width, slot.height - height)
            )

    def _merge(self, sheet: _SheetState) -> None:
        """Merge free rectangles that share a full edge until none remain.

        Works through a queue of arena indices. When two slots merge, the
        earlier one absorbs the later one and is queued again.
        """
        tol = self.config.merge_tolerance
        work = deque(sheet.live_slots())

        while work:
            i = work.popleft()
            if not sheet.free[i].alive:
                continue
            for j in sheet.live_slots():
                if j == i:
                    continue
                keep, drop = (i, j) if i < j else (j, i)
                if self._absorb(sheet.free[keep], sheet.free[drop], tol):
                    sheet.free[drop].alive = False
                    work.append(keep)
                    break

    @staticmethod
    def _absorb(a: _FreeSlot, b: _FreeSlot, tol: float) -> bool:
        """Grow ``a`` to cover ``b`` if they form a single rectangle."""
        if abs(a.y - b.y) <= tol and abs(a.height - b.height) <= tol:
            if abs(a.x + a.width - b.x) <= tol:
                a.width += b.width
                return True
            if abs(b.x + b.width - a.x) <= tol:
                a.x = b.x
                a.width += b.width
                return True
        if abs(a.x - b.x) <= tol and abs(a.width - b.width) <= tol:
            if abs(a.y + a.height - b.y) <= tol:
                a.height += b.height
                return True
            if abs(b.y + b.height - a.y) <= tol:
                a.y = b.y
                a.height += b.height
                return True
        return False
