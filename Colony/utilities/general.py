from Colony.config import Defaults


def chebyshev_range(a: tuple[int, int], b: tuple[int, int]) -> int:
    """Number of 8-connected steps between two cells."""
    return max(abs(a[0] - b[0]), abs(a[1] - b[1]))


def cell_key(cell: tuple[int, int]) -> str:
    return f"{cell[0]}:{cell[1]}"


def parse_cell_key(key: str) -> tuple[int, int]:
    x, y = key.split(":")
    return int(x), int(y)


def cell_from_memory(value):
    """Accept ``[x, y]`` lists (or None) as stored in memory dicts."""
    if value is None:
        return None
    return int(value[0]), int(value[1])


def cell_to_memory(cell):
    if cell is None:
        return None
    return [int(cell[0]), int(cell[1])]


def ring_offsets(radius: int) -> list[tuple[int, int]]:
    """
    Offsets on the square ring ``max(|dx|, |dy|) == radius``.

    Ordered by dx then dy, both ascending, so every caller that walks a ring
    sees the same sequence.
    """
    if radius <= 0:
        return [(0, 0)]
    return [(dx, dy)
            for dx in range(-radius, radius + 1)
            for dy in range(-radius, radius + 1)
            if max(abs(dx), abs(dy)) == radius]


def ring_cells(center: tuple[int, int], radius: int) -> list[tuple[int, int]]:
    cx, cy = center
    return [(cx + dx, cy + dy) for dx, dy in ring_offsets(radius)]


def next_cell_in_direction(cell: tuple[int, int], direction: str) -> tuple[int, int]:
    dx, dy = Defaults.DIRECTION_VECTORS[direction]
    return cell[0] + dx, cell[1] + dy


def direction_between(a: tuple[int, int], b: tuple[int, int]) -> str | None:
    """Direction name for a single step from *a* to adjacent *b*, else None."""
    delta = (b[0] - a[0], b[1] - a[1])
    for name, vec in Defaults.DIRECTION_VECTORS.items():
        if vec == delta:
            return name
    return None
