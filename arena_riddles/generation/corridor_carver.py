"""
Corridor Carver
===============

Carves two-lane corridors and doorway gates between arenas.

A corridor cross-section is split into bands:

    side-wall | lane A floor | separator wall | lane B floor | side-wall

Only the two lane bands become floor. Each lane gets its own gate tile at
both arena walls, so each direction through a doorway can be labelled per
lane (symbols "H" and "V"). A straight carve therefore yields four
GateDescriptors: two lanes times two directions.

Straight carves require the two arenas to share a row or a column of the
canvas (equal centre line). Anything else is refused with ValueError; the
caller routes it through ``carve_dogleg`` or ``carve_elbow`` instead, which
compose straight runs and widen every turn into a corner pocket so movement
colliders do not snag.

The module also holds the floor-only painters used by pad-style layouts,
whose walls are outlined from floor afterwards.
"""

import logging
import random
from dataclasses import dataclass
from typing import Dict, List, Sequence, Tuple

from arena_riddles.core.canvas import Canvas
from arena_riddles.core.definitions import (
    EMPTY_TILE_ID,
    FLOOR_TILE_ID,
    WALL_TILE_ID,
    LANE_A_SYMBOL,
    LANE_B_SYMBOL,
)
from arena_riddles.core.models import Arena, GateDescriptor

logger = logging.getLogger(__name__)

Rect = Tuple[int, int, int, int]

# Unit step pointing from a doorway into the arena that owns it.
INWARD: Dict[str, Tuple[int, int]] = {
    'left': (-1, 0),
    'right': (1, 0),
    'top': (0, -1),
    'bottom': (0, 1),
}


@dataclass(frozen=True)
class CorridorProfile:
    """Band widths of a two-lane corridor cross-section."""
    lane_width: int = 5
    separator_width: int = 1
    side_wall_width: int = 1

    @property
    def total_width(self) -> int:
        return 2 * self.side_wall_width + 2 * self.lane_width + self.separator_width

    @property
    def start_offset(self) -> int:
        return -(self.total_width // 2)

    @property
    def lane_a_offset(self) -> int:
        return self.start_offset + self.side_wall_width

    @property
    def lane_b_offset(self) -> int:
        return self.lane_a_offset + self.lane_width + self.separator_width

    def lanes(self) -> Tuple[Tuple[int, str], Tuple[int, str]]:
        """(offset from centre line, lane symbol) for both lanes."""
        return ((self.lane_a_offset, LANE_A_SYMBOL), (self.lane_b_offset, LANE_B_SYMBOL))

    def is_lane(self, band_index: int) -> bool:
        side, lane, sep = self.side_wall_width, self.lane_width, self.separator_width
        in_a = side <= band_index < side + lane
        in_b = side + lane + sep <= band_index < side + 2 * lane + sep
        return in_a or in_b


class CorridorCarver:
    """
    Writes corridors into a Canvas and reports the gates it created.

    Every method reads the canvas it is given and writes only inside the
    corridor band, the doorway cells and (for turns) the corner pocket.
    """

    def __init__(self, profile: CorridorProfile):
        self.profile = profile

    # ------------------------------------------------------------------
    # Arenas
    # ------------------------------------------------------------------

    def stamp_arena(self, canvas: Canvas, arena: Arena) -> None:
        """Floor inside, one-tile wall ring on the footprint border."""
        canvas.fill_floor(arena.origin_x + 1, arena.origin_y + 1, arena.width - 2, arena.height - 2)
        canvas.wall_ring(arena.origin_x, arena.origin_y, arena.right, arena.bottom)

    # ------------------------------------------------------------------
    # Straight connections
    # ------------------------------------------------------------------

    @staticmethod
    def orientation(a: Arena, b: Arena) -> str:
        """'horizontal' or 'vertical'; ValueError for a diagonal pair."""
        if a.id == b.id:
            raise ValueError(f"Cannot connect arena {a.id} to itself")
        if a.center_y == b.center_y:
            return 'horizontal'
        if a.center_x == b.center_x:
            return 'vertical'
        raise ValueError(
            f"Arenas {a.id} and {b.id} are not grid-aligned; "
            f"use a dogleg or elbow connection"
        )

    def carve(self, canvas: Canvas, a: Arena, b: Arena) -> List[GateDescriptor]:
        """Straight two-lane corridor; four descriptors ordered near end first."""
        if self.orientation(a, b) == 'horizontal':
            left, right = (a, b) if a.origin_x <= b.origin_x else (b, a)
            return self._carve_horizontal(canvas, left, right)
        top, bottom = (a, b) if a.origin_y <= b.origin_y else (b, a)
        return self._carve_vertical(canvas, top, bottom)

    def carve_locked(self, canvas: Canvas, near: Arena, far: Arena,
                     group: str) -> List[GateDescriptor]:
        """
        Straight corridor whose far doorway is one barrier spanning every lane.

        The near-side gates stay ordinary; the far side is tied to ``group`` so
        it opens only when the puzzle fires that trigger group.
        """
        gates = self.carve(canvas, near, far)
        return self._lock_far_side(gates, near, far, group)

    def _carve_horizontal(self, canvas: Canvas, left: Arena, right: Arena) -> List[GateDescriptor]:
        p = self.profile
        cy = left.center_y
        left_door = left.right
        right_door = right.origin_x

        self._carve_run(canvas, True, left_door + 1, right_door - 1, cy, overwrite=True)
        for offset, _ in p.lanes():
            canvas.carve_opening(left_door - 1, cy + offset, 1, p.lane_width)
            canvas.carve_opening(right_door + 1, cy + offset, 1, p.lane_width)
            canvas.stamp_gate(left_door, cy + offset, 1, p.lane_width)
            canvas.stamp_gate(right_door, cy + offset, 1, p.lane_width)

        gates = []
        for door_x, src, dst, side in ((left_door, left, right, 'left'),
                                       (right_door, right, left, 'right')):
            for offset, symbol in p.lanes():
                gates.append(GateDescriptor(src.id, dst.id, door_x, cy + offset,
                                            1, p.lane_width, symbol, side))
        return gates

    def _carve_vertical(self, canvas: Canvas, top: Arena, bottom: Arena) -> List[GateDescriptor]:
        p = self.profile
        cx = top.center_x
        top_door = top.bottom
        bottom_door = bottom.origin_y

        self._carve_run(canvas, False, top_door + 1, bottom_door - 1, cx, overwrite=True)
        for offset, _ in p.lanes():
            canvas.carve_opening(cx + offset, top_door - 1, p.lane_width, 1)
            canvas.carve_opening(cx + offset, bottom_door + 1, p.lane_width, 1)
            canvas.stamp_gate(cx + offset, top_door, p.lane_width, 1)
            canvas.stamp_gate(cx + offset, bottom_door, p.lane_width, 1)

        gates = []
        for door_y, src, dst, side in ((top_door, top, bottom, 'top'),
                                       (bottom_door, bottom, top, 'bottom')):
            for offset, symbol in p.lanes():
                gates.append(GateDescriptor(src.id, dst.id, cx + offset, door_y,
                                            p.lane_width, 1, symbol, side))
        return gates

    # ------------------------------------------------------------------
    # Turning connections
    # ------------------------------------------------------------------

    def carve_dogleg(self, canvas: Canvas, near: Arena, far: Arena,
                     group: str = None) -> List[GateDescriptor]:
        """
        Down / across / down corridor between vertically stacked arenas whose
        columns differ. With ``group`` the far doorway becomes a locked barrier.
        """
        if near.center_x == far.center_x:
            if group is not None:
                return self.carve_locked(canvas, near, far, group)
            return self.carve(canvas, near, far)

        p = self.profile
        top, bottom = (near, far) if near.origin_y <= far.origin_y else (far, near)
        top_door = top.bottom
        bottom_door = bottom.origin_y
        top_out = top_door + 1
        bottom_out = bottom_door - 1
        if bottom_out - top_out < 4:
            raise ValueError(f"No room for a dogleg between {top.id} and {bottom.id}")

        elbow_y = (top_out + bottom_out) // 2
        elbow_y = max(top_out + 2, min(bottom_out - 2, elbow_y))
        tx, bx = top.center_x, bottom.center_x

        self._carve_run(canvas, False, top_out, elbow_y, tx, overwrite=False)
        self._carve_run(canvas, True, min(tx, bx), max(tx, bx), elbow_y, overwrite=False)
        self._carve_run(canvas, False, elbow_y, bottom_out, bx, overwrite=False)
        self.carve_corner_pocket(canvas, tx, elbow_y)
        self.carve_corner_pocket(canvas, bx, elbow_y)

        for offset, _ in p.lanes():
            canvas.carve_opening(tx + offset, top_door - 1, p.lane_width, 2)
            canvas.stamp_gate(tx + offset, top_door, p.lane_width, 1)
            canvas.carve_opening(bx + offset, bottom_door, p.lane_width, 2)
            canvas.stamp_gate(bx + offset, bottom_door, p.lane_width, 1)

        gates = []
        for door_y, door_x, src, dst, side in ((top_door, tx, top, bottom, 'top'),
                                               (bottom_door, bx, bottom, top, 'bottom')):
            for offset, symbol in p.lanes():
                gates.append(GateDescriptor(src.id, dst.id, door_x + offset, door_y,
                                            p.lane_width, 1, symbol, side))
        gates.sort(key=lambda g: g.source_arena_id != near.id)
        logger.debug(f"Dogleg {near.id} -> {far.id} elbow at row {elbow_y}")

        if group is not None:
            return self._lock_far_side(gates, near, far, group)
        return gates

    def carve_elbow(self, canvas: Canvas, a: Arena, b: Arena,
                    rng: random.Random) -> List[GateDescriptor]:
        """
        Single-turn corridor. One arena is left through a side wall and the
        other entered through its top or bottom wall; ``rng`` picks which.
        """
        if a.center_x == b.center_x or a.center_y == b.center_y:
            return self.carve(canvas, a, b)
        if rng.random() < 0.5:
            gates = self._carve_elbow_from(canvas, a, b)
        else:
            gates = self._carve_elbow_from(canvas, b, a)
        gates.sort(key=lambda g: g.source_arena_id != a.id)
        return gates

    def _carve_elbow_from(self, canvas: Canvas, side_exit: Arena,
                          end_entry: Arena) -> List[GateDescriptor]:
        p = self.profile
        ay = side_exit.center_y
        bx = end_entry.center_x

        go_east = bx > side_exit.center_x
        a_door = side_exit.right if go_east else side_exit.origin_x
        a_step = 1 if go_east else -1

        below = end_entry.center_y > ay
        b_door = end_entry.origin_y if below else end_entry.bottom
        b_step = 1 if below else -1

        a_out = a_door + a_step
        b_out = b_door - b_step
        self._carve_run(canvas, True, min(a_out, bx), max(a_out, bx), ay, overwrite=False)
        self._carve_run(canvas, False, min(ay, b_out), max(ay, b_out), bx, overwrite=False)
        self.carve_corner_pocket(canvas, bx, ay)

        for offset, _ in p.lanes():
            canvas.carve_opening(min(a_door, a_door - a_step), ay + offset, 2, p.lane_width)
            canvas.stamp_gate(a_door, ay + offset, 1, p.lane_width)
            canvas.carve_opening(bx + offset, min(b_door, b_door + b_step), p.lane_width, 2)
            canvas.stamp_gate(bx + offset, b_door, p.lane_width, 1)

        a_side = 'left' if go_east else 'right'
        b_side = 'bottom' if below else 'top'
        gates = []
        for offset, symbol in p.lanes():
            gates.append(GateDescriptor(side_exit.id, end_entry.id, a_door, ay + offset,
                                        1, p.lane_width, symbol, a_side))
        for offset, symbol in p.lanes():
            gates.append(GateDescriptor(end_entry.id, side_exit.id, bx + offset, b_door,
                                        p.lane_width, 1, symbol, b_side))
        return gates

    def carve_corner_pocket(self, canvas: Canvas, x_center: int, y_center: int) -> None:
        """Open a full corridor-width square at a turn, then re-close its rim."""
        t = self.profile.total_width
        x0 = x_center + self.profile.start_offset
        y0 = y_center + self.profile.start_offset
        canvas.carve_opening(x0, y0, t, t)
        canvas.rebuild_walls_around(x0 - 1, y0 - 1, x0 + t, y0 + t)

    # ------------------------------------------------------------------
    # Internals
    # ------------------------------------------------------------------

    def _carve_run(self, canvas: Canvas, horizontal: bool, start: int, end: int,
                   center: int, overwrite: bool) -> None:
        """
        Stamp the banded cross-section along [start, end]. Without
        ``overwrite`` wall bands never land on existing floor.
        """
        p = self.profile
        for pos in range(start, end + 1):
            for idx in range(p.total_width):
                across = center + p.start_offset + idx
                x, y = (pos, across) if horizontal else (across, pos)
                if not canvas.in_bounds(x, y):
                    continue
                if p.is_lane(idx):
                    canvas.floor[y, x] = FLOOR_TILE_ID
                elif overwrite or canvas.floor[y, x] == EMPTY_TILE_ID:
                    canvas.walls[y, x] = WALL_TILE_ID

    @staticmethod
    def _lock_far_side(gates: List[GateDescriptor], near: Arena, far: Arena,
                       group: str) -> List[GateDescriptor]:
        kept = [g for g in gates if g.source_arena_id == near.id]
        far_side = [g for g in gates if g.source_arena_id == far.id]
        x0 = min(g.x for g in far_side)
        y0 = min(g.y for g in far_side)
        x1 = max(g.x + g.width for g in far_side)
        y1 = max(g.y + g.height for g in far_side)
        barrier = GateDescriptor(far.id, near.id, x0, y0, x1 - x0, y1 - y0,
                                 None, far_side[0].side, group)
        return kept + [barrier]


# ======================================================================
# Doorway clearance
# ======================================================================

def doorway_clearance_rects(gates: Sequence[GateDescriptor], depth: int) -> Dict[str, List[Rect]]:
    """
    Inclusive (x0, y0, x1, y1) rectangles reaching ``depth`` tiles into each
    arena from every doorway it owns, spanning all lanes of that doorway.
    """
    spans: Dict[Tuple[str, str, int], List[int]] = {}
    for g in gates:
        dx, dy = INWARD[g.side]
        door = g.x if dx else g.y
        key = (g.source_arena_id, g.side, door)
        lo, hi = (g.y, g.y + g.height - 1) if dx else (g.x, g.x + g.width - 1)
        if key in spans:
            spans[key][0] = min(spans[key][0], lo)
            spans[key][1] = max(spans[key][1], hi)
        else:
            spans[key] = [lo, hi]

    out: Dict[str, List[Rect]] = {}
    for (arena_id, side, door), (lo, hi) in spans.items():
        dx, dy = INWARD[side]
        step = dx or dy
        a, b = door + step, door + step * depth
        near, far = min(a, b), max(a, b)
        rect = (near, lo, far, hi) if dx else (lo, near, hi, far)
        out.setdefault(arena_id, []).append(rect)
    return out


def in_any_rect(x: int, y: int, rects: Sequence[Rect]) -> bool:
    return any(r[0] <= x <= r[2] and r[1] <= y <= r[3] for r in rects)


def is_near_any_gate(x: int, y: int, gates: Sequence[GateDescriptor], margin: int) -> bool:
    for g in gates:
        if (g.x - margin <= x <= g.x + g.width - 1 + margin
                and g.y - margin <= y <= g.y + g.height - 1 + margin):
            return True
    return False


# ======================================================================
# Floor painters for pad-style layouts
# ======================================================================

def paint_corridor_horizontal(canvas: Canvas, y: int, x0: int, x1: int, width: int) -> None:
    half = width // 2
    canvas.fill_floor(min(x0, x1), y - half, abs(x1 - x0) + 1, 2 * half + 1)


def paint_corridor_vertical(canvas: Canvas, x: int, y0: int, y1: int, width: int) -> None:
    half = width // 2
    canvas.fill_floor(x - half, min(y0, y1), 2 * half + 1, abs(y1 - y0) + 1)


def paint_l_corridor(canvas: Canvas, x0: int, y0: int, x1: int, y1: int,
                     width: int, rng: random.Random) -> None:
    if rng.random() < 0.5:
        paint_corridor_horizontal(canvas, y0, x0, x1, width)
        paint_corridor_vertical(canvas, x1, y0, y1, width)
    else:
        paint_corridor_vertical(canvas, x0, y0, y1, width)
        paint_corridor_horizontal(canvas, y1, x0, x1, width)


def paint_zigzag_corridor(canvas: Canvas, x0: int, y0: int, x1: int, y1: int,
                          width: int, rng: random.Random, jitter: int = 10) -> None:
    """Three-segment corridor whose middle leg is jittered around the midpoint."""
    if rng.random() < 0.5:
        mid_x = _clamp((x0 + x1) // 2 + rng.randint(-jitter, jitter), min(x0, x1), max(x0, x1))
        paint_three_leg_corridor(canvas, x0, y0, x1, y1, mid_x, width)
    else:
        mid_y = _clamp((y0 + y1) // 2 + rng.randint(-jitter, jitter), min(y0, y1), max(y0, y1))
        paint_corridor_vertical(canvas, x0, y0, mid_y, width)
        paint_corridor_horizontal(canvas, mid_y, x0, x1, width)
        paint_corridor_vertical(canvas, x1, mid_y, y1, width)


def paint_three_leg_corridor(canvas: Canvas, x0: int, y0: int, x1: int, y1: int,
                             mid_x: int, width: int) -> None:
    """Horizontal to ``mid_x``, vertical to ``y1``, horizontal to ``x1``."""
    paint_corridor_horizontal(canvas, y0, x0, mid_x, width)
    paint_corridor_vertical(canvas, mid_x, y0, y1, width)
    paint_corridor_horizontal(canvas, y1, mid_x, x1, width)


def paint_arena_floor(canvas: Canvas, arena: Arena) -> None:
    """Floor inside the footprint; the border row is left for the wall outline."""
    canvas.fill_floor(arena.origin_x + 1, arena.origin_y + 1, arena.width - 2, arena.height - 2)
    canvas.set_floor(arena.center_x, arena.center_y)


def paint_diamond_pad(canvas: Canvas, cx: int, cy: int, radius: int) -> None:
    for dy in range(-radius, radius + 1):
        for dx in range(-radius, radius + 1):
            if abs(dx) + abs(dy) <= radius:
                canvas.set_floor(cx + dx, cy + dy)


def _clamp(v: int, lo: int, hi: int) -> int:
    return max(lo, min(hi, v))


# ======================================================================
# Functional forms
# ======================================================================

def carve_connection(canvas: Canvas, a: Arena, b: Arena,
                     profile: CorridorProfile) -> List[GateDescriptor]:
    return CorridorCarver(profile).carve(canvas, a, b)


def carve_locked_connection(canvas: Canvas, near: Arena, far: Arena,
                            profile: CorridorProfile, group: str) -> List[GateDescriptor]:
    return CorridorCarver(profile).carve_locked(canvas, near, far, group)


def carve_dogleg_connection(canvas: Canvas, near: Arena, far: Arena,
                            profile: CorridorProfile, group: str = None) -> List[GateDescriptor]:
    return CorridorCarver(profile).carve_dogleg(canvas, near, far, group)


def carve_elbow_connection(canvas: Canvas, a: Arena, b: Arena, profile: CorridorProfile,
                           rng: random.Random) -> List[GateDescriptor]:
    return CorridorCarver(profile).carve_elbow(canvas, a, b, rng)
