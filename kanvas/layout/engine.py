"""
Geometry for the editor canvas.

Pure functions: default placement of a new sibling, clamped and snapped
moves, and eight-handle resizing. Nothing here touches the element store.
"""
import math
from dataclasses import dataclass
from typing import Dict, Iterable, Optional, Tuple, Union

GRID_SIZE = 10
SIBLING_GAP = 10
FALLBACK_WIDTH = 200
FALLBACK_HEIGHT = 150
CONTAINER_FALLBACK_WIDTH = 400
CONTAINER_FALLBACK_HEIGHT = 300
TOP_LEVEL_BASE = 100
NESTED_BASE = 10
MIN_WIDTH = 50
MIN_HEIGHT = 30
DIVIDER_MIN_HEIGHT = 2

RESIZE_DIRECTIONS = ("n", "s", "e", "w", "ne", "nw", "se", "sw")

Number = Union[int, float]


@dataclass(frozen=True)
class Canvas:
    """Pixel extent of the top-level drawing area"""
    width: Number = 1000
    height: Number = 1000


def snap(value: Number, grid: int = GRID_SIZE) -> Number:
    """Round to the nearest multiple of ``grid``, halves rounding up"""
    if grid <= 0:
        return value
    return int(math.floor(value / grid + 0.5)) * grid


def pixel_size(value, fallback: Number) -> Number:
    """Numeric sizes pass through; ``auto``/``100%`` resolve to ``fallback``"""
    if isinstance(value, (int, float)) and not isinstance(value, bool):
        return value
    return fallback


def default_position(siblings: Iterable, nested: bool) -> Tuple[Number, Number]:
    """
    Position for a new element placed below its siblings.

    The sibling with the greatest bottom edge wins; the new element takes
    its ``x`` and sits ``SIBLING_GAP`` below it. Without siblings the fixed
    base (100 top-level, 10 nested) is used for both axes.
    """
    lowest = None
    lowest_bottom = None
    for sibling in siblings:
        bottom = sibling.y + pixel_size(sibling.height, FALLBACK_HEIGHT)
        if lowest_bottom is None or bottom > lowest_bottom:
            lowest, lowest_bottom = sibling, bottom

    if lowest is None:
        base = NESTED_BASE if nested else TOP_LEVEL_BASE
        return base, base
    return lowest.x, lowest_bottom + SIBLING_GAP


def parent_extent(parent, canvas: Canvas) -> Tuple[Number, Number]:
    """Resolved pixel width/height of the area an element moves within"""
    if parent is None:
        return canvas.width, canvas.height
    width = canvas.width if parent.is_full_width else pixel_size(parent.width, CONTAINER_FALLBACK_WIDTH)
    height = canvas.height if parent.is_full_height else pixel_size(parent.height, CONTAINER_FALLBACK_HEIGHT)
    return width, height


def _clamp(value: Number, upper: Number) -> Number:
    return max(0, min(value, upper))


def move(element, x: Number, y: Number, parent=None,
         canvas: Optional[Canvas] = None, grid: int = GRID_SIZE) -> Optional[Dict[str, Number]]:
    """
    Clamp a proposed position to the parent bounds and snap it to the grid.

    Returns the ``{"x", "y"}`` update, or None for relatively positioned
    elements, which flow in document order and cannot be dragged.
    """
    if element.position_type == "relative":
        return None
    canvas = canvas or Canvas()
    extent_w, extent_h = parent_extent(parent, canvas)
    own_w = pixel_size(element.width, FALLBACK_WIDTH)
    own_h = pixel_size(element.height, FALLBACK_HEIGHT)
    return {
        "x": snap(_clamp(x, extent_w - own_w), grid),
        "y": snap(_clamp(y, extent_h - own_h), grid),
    }


def min_height_for(element) -> Number:
    return DIVIDER_MIN_HEIGHT if element.type == "divider" else MIN_HEIGHT


def resize(element, direction: str, dx: Number, dy: Number,
           grid: int = GRID_SIZE) -> Dict[str, Number]:
    """
    Geometry update for dragging one of the eight resize handles.

    Deltas are snapped before use. Handles on the left/top edge move ``x``/
    ``y`` by exactly the size change applied, so the opposite edge stays put
    when a minimum size is hit. Full-width/full-height elements ignore the
    corresponding axis. Returns only the fields that change.
    """
    if direction not in RESIZE_DIRECTIONS:
        raise ValueError(f"Unknown resize direction: {direction}")

    snap_dx = snap(dx, grid)
    snap_dy = snap(dy, grid)
    changes: Dict[str, Number] = {}

    if not element.is_full_width and ("e" in direction or "w" in direction):
        width = pixel_size(element.width, FALLBACK_WIDTH)
        if "e" in direction:
            changes["width"] = max(MIN_WIDTH, width + snap_dx)
        else:
            new_width = max(MIN_WIDTH, width - snap_dx)
            new_x = element.x + (width - new_width)
            if new_x < 0:
                # right edge stays fixed, growth stops at the canvas edge
                new_width = max(MIN_WIDTH, element.x + width)
                new_x = 0
            changes["width"] = new_width
            changes["x"] = new_x

    if not element.is_full_height and ("n" in direction or "s" in direction):
        height = pixel_size(element.height, FALLBACK_HEIGHT)
        min_height = min_height_for(element)
        if "s" in direction:
            changes["height"] = max(min_height, height + snap_dy)
        else:
            new_height = max(min_height, height - snap_dy)
            new_y = element.y + (height - new_height)
            if new_y < 0:
                new_height = max(min_height, element.y + height)
                new_y = 0
            changes["height"] = new_height
            changes["y"] = new_y

    return changes
