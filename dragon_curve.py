#!/usr/bin/env python3
"""dragon_curve.py

Renders a dragon curve by stamping a rotated corner tile at every turn and
writes the result as a plain-text PPM image.

Key features:
- Iterative fold generation of the turn sequence.
- One shared walking routine for the bounds pass and the render pass.
- Tile atlas with the four 90-degree corner orientations.
- Binary canvas (numpy) composited by logical OR.

Run:
  python dragon_curve.py tile.txt dragon.ppm 12
  python dragon_curve.py tile.txt dragon.ppm 12 255 128 0
  python dragon_curve.py tile.txt dragon.ppm 20 --dry-run
  python dragon_curve.py --help
"""

from __future__ import annotations

import argparse
import os
import sys
from collections.abc import Generator, Iterable, Sequence
from dataclasses import dataclass
from enum import IntEnum
from typing import Literal

import numpy as np
from numpy.typing import NDArray

Grid = NDArray[np.bool_]
Curve = tuple[bool, ...]


# -------------------------
# Errors
# -------------------------


class FileAccessError(Exception):
    """A tile or image file could not be read or written."""

    def __init__(
        self, path: str, operation: Literal["read", "write"], reason: str
    ) -> None:
        self.path = path
        self.operation = operation
        self.reason = reason
        super().__init__(str(self))

    def __str__(self) -> str:
        if self.operation == "read":
            verb, mode = "open", "reading"
        else:
            verb, mode = "save", "writing"
        return f"Unable to {verb} `{self.path}` for {mode}: {self.reason}"


class InputAccessError(FileAccessError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, "read", reason)


class OutputAccessError(FileAccessError):
    def __init__(self, path: str, reason: str) -> None:
        super().__init__(path, "write", reason)


# -------------------------
# Directions / positions
# -------------------------


class Direction(IntEnum):
    NORTH = 0
    EAST = 1
    SOUTH = 2
    WEST = 3

    def rotate(self, clockwise: bool) -> Direction:
        return Direction((self + (1 if clockwise else -1)) % 4)

    def reverse(self) -> Direction:
        return Direction((self + 2) % 4)


# Screen space: y grows downward.
_STEPS: dict[Direction, tuple[int, int]] = {
    Direction.NORTH: (0, -1),
    Direction.EAST: (1, 0),
    Direction.SOUTH: (0, 1),
    Direction.WEST: (-1, 0),
}


@dataclass(frozen=True)
class Coordinates:
    x: int = 0
    y: int = 0

    def translate(self, direction: Direction) -> Coordinates:
        dx, dy = _STEPS[direction]
        return Coordinates(self.x + dx, self.y + dy)


# -------------------------
# Curve generation
# -------------------------


def generate_turns(iterations: int) -> Curve:
    """Return the dragon curve turn sequence after ``iterations`` folds.

    True is a clockwise (right) turn. Each fold appends a right turn followed
    by the reversed complement of everything so far, so the result has
    ``2**iterations - 1`` turns.
    """
    if iterations < 0:
        raise ValueError(f"iterations must be >= 0; got {iterations}")

    turns: list[bool] = []
    for _ in range(iterations):
        to_append = [not t for t in turns]
        turns.append(True)
        turns.extend(reversed(to_append))
    return tuple(turns)


# -------------------------
# Walking / bounds
# -------------------------


@dataclass(frozen=True)
class Step:
    position: Coordinates
    before: Direction
    after: Direction
    destination: Coordinates


def walk(
    turns: Iterable[bool], start: Coordinates = Coordinates()
) -> Generator[Step, None, None]:
    """Yield one Step per turn: rotate the heading, then advance one cell.

    The walker starts at ``start`` facing north. ``position`` is the cell
    occupied before advancing, ``destination`` the cell after.
    """
    heading = Direction.NORTH
    position = start
    for turn in turns:
        before = heading
        heading = heading.rotate(turn)
        destination = position.translate(heading)
        yield Step(position, before, heading, destination)
        position = destination


@dataclass(frozen=True)
class Bounds:
    min_x: int
    min_y: int
    max_x: int
    max_y: int

    @property
    def width_cells(self) -> int:
        return self.max_x - self.min_x + 1

    @property
    def height_cells(self) -> int:
        return self.max_y - self.min_y + 1

    @property
    def offset(self) -> Coordinates:
        """Translation that moves the walk's origin into array space."""
        return Coordinates(-self.min_x, -self.min_y)


def compute_bounds(turns: Iterable[bool]) -> Bounds:
    # The origin counts even when no step is taken.
    min_x = min_y = max_x = max_y = 0
    for step in walk(turns):
        x, y = step.destination.x, step.destination.y
        if x < min_x:
            min_x = x
        if x > max_x:
            max_x = x
        if y < min_y:
            min_y = y
        if y > max_y:
            max_y = y
    return Bounds(min_x, min_y, max_x, max_y)


# -------------------------
# Tile atlas
# -------------------------

CornerKey = tuple[Direction, Direction]

_TRUE_TOKENS = frozenset({"1", "true", "yes", "on"})
_FALSE_TOKENS = frozenset({"0", "false", "no", "off"})


def corner_key(a: Direction, b: Direction) -> CornerKey:
    """Canonical (order-independent) key for a corner between two directions."""
    return (a, b) if a <= b else (b, a)


def rotate_clockwise(grid: Grid) -> Grid:
    """Rotate a grid 90 degrees clockwise: cell (i, j) moves to (j, S-1-i)."""
    return np.rot90(grid, k=-1).copy()


class TileAtlas:
    """The four corner orientations of one square binary tile.

    The base grid is the tile drawn for a path joining the north and west
    edges of a cell. The remaining corners are successive clockwise
    rotations: north-west, north-east, south-east, south-west.
    """

    _CHAIN: tuple[CornerKey, ...] = (
        corner_key(Direction.NORTH, Direction.WEST),
        corner_key(Direction.NORTH, Direction.EAST),
        corner_key(Direction.SOUTH, Direction.EAST),
        corner_key(Direction.SOUTH, Direction.WEST),
    )

    def __init__(self, base: Grid) -> None:
        base = np.array(base, dtype=bool)
        if base.ndim != 2 or base.shape[0] != base.shape[1] or base.size == 0:
            raise ValueError(f"tile must be a non-empty square grid; got {base.shape}")

        self._grids: dict[CornerKey, Grid] = {}
        grid = base
        for key in self._CHAIN:
            grid.flags.writeable = False
            self._grids[key] = grid
            grid = rotate_clockwise(grid)

    @property
    def size(self) -> int:
        return int(self.base.shape[0])

    @property
    def base(self) -> Grid:
        return self._grids[self._CHAIN[0]]

    @property
    def corners(self) -> frozenset[CornerKey]:
        return frozenset(self._grids)

    def lookup(self, a: Direction, b: Direction) -> Grid:
        key = corner_key(a, b)
        if key not in self._grids:
            raise KeyError(f"no corner between {a.name} and {b.name}")
        return self._grids[key]


def _parse_flag(token: str) -> bool:
    t = token.lower()
    if t in _TRUE_TOKENS:
        return True
    if t in _FALSE_TOKENS:
        return False
    raise ValueError(f"expected a boolean pixel value, got {token!r}")


def parse_tile(text: str) -> Grid:
    """Parse ``S`` followed by S*S boolean tokens in row-major order."""
    tokens = text.split()
    if not tokens:
        raise ValueError("tile is empty")

    try:
        size = int(tokens[0])
    except ValueError:
        raise ValueError(f"tile size must be an integer, got {tokens[0]!r}") from None
    if size < 1:
        raise ValueError(f"tile size must be >= 1, got {size}")

    values = tokens[1:]
    if len(values) != size * size:
        raise ValueError(
            f"tile declares size {size} ({size * size} pixels) "
            f"but contains {len(values)} values"
        )

    flags = [_parse_flag(v) for v in values]
    return np.array(flags, dtype=bool).reshape(size, size)


def load_tile(path: str) -> TileAtlas:
    try:
        with open(path, encoding="utf-8") as f:
            text = f.read()
    except (OSError, UnicodeDecodeError) as e:
        raise InputAccessError(path, str(e)) from e

    try:
        return TileAtlas(parse_tile(text))
    except ValueError as e:
        raise InputAccessError(path, f"malformed tile: {e}") from e


# -------------------------
# Canvas / rendering
# -------------------------


class Canvas:
    """Binary pixel buffer. Bits are only ever set, never cleared."""

    def __init__(self, width: int, height: int) -> None:
        if width < 1 or height < 1:
            raise ValueError(f"canvas must be at least 1x1; got {width}x{height}")
        self.pixels: Grid = np.zeros((height, width), dtype=bool)

    @classmethod
    def for_bounds(cls, bounds: Bounds, tile_size: int) -> Canvas:
        return cls(bounds.width_cells * tile_size, bounds.height_cells * tile_size)

    @property
    def width(self) -> int:
        return int(self.pixels.shape[1])

    @property
    def height(self) -> int:
        return int(self.pixels.shape[0])

    def count_on(self) -> int:
        return int(np.count_nonzero(self.pixels))

    def stamp(self, grid: Grid, cell: Coordinates) -> None:
        rows, cols = grid.shape
        top, left = cell.y * rows, cell.x * cols
        if top < 0 or left < 0 or top + rows > self.height or left + cols > self.width:
            raise ValueError(
                f"stamp at cell ({cell.x}, {cell.y}) falls outside "
                f"{self.width}x{self.height} canvas"
            )
        region = self.pixels[top : top + rows, left : left + cols]
        np.logical_or(region, grid, out=region)


def render(turns: Sequence[bool], atlas: TileAtlas) -> Canvas:
    """Stamp one corner tile per turn onto a freshly sized canvas."""
    bounds = compute_bounds(turns)
    canvas = Canvas.for_bounds(bounds, atlas.size)

    if not turns:
        # A curve with no folds is a single cell; draw the base corner there.
        canvas.stamp(atlas.base, bounds.offset)
        return canvas

    for step in walk(turns, bounds.offset):
        # The path enters the cell from the side opposite its previous heading.
        canvas.stamp(atlas.lookup(step.before.reverse(), step.after), step.position)
    return canvas


# -------------------------
# PPM writing
# -------------------------


@dataclass(frozen=True)
class Color:
    red: int = 0
    green: int = 255
    blue: int = 0

    @classmethod
    def clamped(cls, red: int, green: int, blue: int) -> Color:
        return cls(*(min(max(c, 0), 255) for c in (red, green, blue)))

    def __str__(self) -> str:
        return f"{self.red} {self.green} {self.blue}"


DEFAULT_COLOR = Color()
_BACKGROUND = Color(0, 0, 0)


def format_ppm(canvas: Canvas, color: Color) -> str:
    on, off = str(color), str(_BACKGROUND)

    lines: list[str] = []
    lines.append("P3")
    lines.append(f"{canvas.width} {canvas.height}")
    lines.append("255")
    for row in canvas.pixels:
        lines.append(" ".join(on if p else off for p in row))
    return "\n".join(lines) + "\n"


def _ensure_parent_dir(path: str) -> None:
    os.makedirs(os.path.dirname(os.path.abspath(path)) or ".", exist_ok=True)


def write_ppm(canvas: Canvas, color: Color, out_path: str) -> None:
    content = format_ppm(canvas, color)
    try:
        _ensure_parent_dir(out_path)
        with open(out_path, "w", encoding="ascii") as f:
            f.write(content)
    except OSError as e:
        raise OutputAccessError(out_path, str(e)) from e


# -------------------------
# CLI / Help
# -------------------------

HELP_EPILOG = r"""
TILE FILE SYNTAX

A tile is a whitespace-separated text file:

  S
  v(0,0) v(0,1) ... v(0,S-1)
  ...
  v(S-1,0) ...   v(S-1,S-1)

  S: integer >= 1, the tile edge length in pixels.
  v: one pixel value per cell, row-major. Accepted values (any case):
     1/0, true/false, yes/no, on/off.

The tile is drawn for a corner joining the NORTH and WEST edges of a cell;
the other three corners are produced by rotating it clockwise.

Example (3x3 corner):

  3
  0 1 0
  1 1 0
  0 0 0

OUTPUT

A plain-text PPM (P3) image. Pixels covered by a tile take the foreground
colour (default 0 255 0); all others are black. The image measures
(curve width in cells * S) by (curve height in cells * S) pixels and grows
roughly twofold with each iteration.
"""


def build_argparser() -> argparse.ArgumentParser:
    p = argparse.ArgumentParser(
        prog="dragon_curve.py",
        description="Render a dragon curve from a corner tile to a PPM image.",
        formatter_class=argparse.RawDescriptionHelpFormatter,
        epilog=HELP_EPILOG,
    )
    p.add_argument("tile", help="Path to the corner tile text file.")
    p.add_argument("output", help="Path to write the PPM image.")
    p.add_argument(
        "iterations", type=int, help="Number of folds (negative values mean 0)."
    )
    p.add_argument(
        "color",
        nargs="*",
        type=int,
        metavar="CHANNEL",
        help="Optional RED GREEN BLUE foreground, each clamped to 0-255.",
    )
    p.add_argument(
        "--dry-run",
        action="store_true",
        help="Load the tile and print the image size without writing anything.",
    )
    return p


# -------------------------
# Commands
# -------------------------


def cmd_render(tile_path: str, output_path: str, iterations: int, color: Color) -> None:
    atlas = load_tile(tile_path)
    turns = generate_turns(iterations)
    canvas = render(turns, atlas)
    write_ppm(canvas, color, output_path)


def cmd_dry_run(tile_path: str, iterations: int) -> None:
    atlas = load_tile(tile_path)
    turns = generate_turns(iterations)
    bounds = compute_bounds(turns)

    print(f"iterations: {iterations}")
    print(f"turns: {len(turns)}")
    print(f"tile size: {atlas.size}")
    print(f"cells: {bounds.width_cells}x{bounds.height_cells}")
    print(
        f"pixels: {bounds.width_cells * atlas.size}x{bounds.height_cells * atlas.size}"
    )


def main(argv: list[str] | None = None) -> int:
    ap = build_argparser()
    args = ap.parse_args(argv)

    if len(args.color) not in (0, 3):
        ap.print_usage(sys.stderr)
        print(
            f"{ap.prog}: error: expected 0 or 3 colour channels, got {len(args.color)}",
            file=sys.stderr,
        )
        return 2

    iterations = max(args.iterations, 0)
    color = Color.clamped(*args.color) if args.color else DEFAULT_COLOR

    try:
        if args.dry_run:
            cmd_dry_run(args.tile, iterations)
        else:
            cmd_render(args.tile, args.output, iterations, color)
    except FileAccessError as e:
        print(e, file=sys.stderr)
        return 1
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
