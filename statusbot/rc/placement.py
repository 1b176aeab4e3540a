"""
Grid placement for the bot avatar.

Virtual RC only lets a bot update a desk it is standing next to, so
before every desk update the bot walks to one of the 8 cells around it.
"""

from statusbot.rc.models import Position

GRID_X_MIN = 0
GRID_X_MAX = 169
GRID_Y_MIN = 0
GRID_Y_MAX = 109


def _clamp(value: int, low: int, high: int) -> int:
    return max(low, min(high, value))


def clamp_position(x: int, y: int) -> Position:
    """Build a Position with each coordinate clamped into the grid."""
    return Position(
        x=_clamp(x, GRID_X_MIN, GRID_X_MAX),
        y=_clamp(y, GRID_Y_MIN, GRID_Y_MAX),
    )


def surrounding_positions(pos: Position) -> list[Position]:
    """
    List the 8 cells around a desk, in the order the bot should try them.

    Left and right come first because desks in Virtual RC are usually
    laid out in rows. Cells on the edge of the grid are clamped, so a desk
    in a corner yields repeated positions; each one is still tried.

    Args:
        pos: Position of the desk.

    Returns:
        left, right, top, top-left, top-right, bottom, bottom-left, bottom-right.
    """
    offsets = [
        (-1, 0),   # left
        (1, 0),    # right
        (0, -1),   # top
        (-1, -1),  # top left
        (1, -1),   # top right
        (0, 1),    # bottom
        (-1, 1),   # bottom left
        (1, 1),    # bottom right
    ]
    return [clamp_position(pos.x + dx, pos.y + dy) for dx, dy in offsets]
