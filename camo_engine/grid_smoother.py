"""
Cellular-automaton majority filter over a quantised layer grid.

Used by the Digital family to turn a noisy per-cell classification into
blocky but connected regions.  Neighbourhoods wrap toroidally, which is
what keeps the digital grid seamless.
"""

import logging

log = logging.getLogger(__name__)

try:
    import numpy as np
except ImportError:
    raise ImportError(
        "numpy is required for grid smoothing. "
        "Install it with: pip install numpy"
    )

# Cells with fewer matching neighbours than this are candidates for change
_MIN_SAME_NEIGHBOURS = 3

# A candidate only flips if the winning neighbour value has at least this count
_MIN_MAJORITY = 4

_NEIGHBOUR_OFFSETS = [
    (-1, -1), (-1, 0), (-1, 1),
    (0, -1), (0, 1),
    (1, -1), (1, 0), (1, 1),
]


def iterations_for_complexity(complexity):
    """Lower complexity -> fewer passes -> coarser regions (at least 1)."""
    return max(1, int(complexity) // 25)


def _neighbour_stack(grid):
    """(8, rows, cols) array of each cell's toroidal neighbours."""
    return np.stack([
        np.roll(np.roll(grid, -dy, axis=0), -dx, axis=1)
        for dy, dx in _NEIGHBOUR_OFFSETS
    ])


def smooth_step(grid):
    """
    One synchronous automaton update.

    A cell with fewer than 3 same-valued neighbours takes the most
    frequent neighbour value, but only when that value appears in at
    least 4 of the 8 neighbours.  Ties go to the smallest layer id.
    """
    grid = np.asarray(grid)
    neighbours = _neighbour_stack(grid)
    same = (neighbours == grid[None, :, :]).sum(axis=0)

    values = np.unique(grid)
    counts = np.stack([(neighbours == v).sum(axis=0) for v in values])
    best_idx = np.argmax(counts, axis=0)
    best_count = np.take_along_axis(counts, best_idx[None, :, :], axis=0)[0]
    best_value = values[best_idx]

    flip = (same < _MIN_SAME_NEIGHBOURS) & (best_count >= _MIN_MAJORITY)
    return np.where(flip, best_value, grid)


def smooth_grid(grid, iterations):
    """
    Run *iterations* automaton passes over *grid*.

    Args:
        grid:       2-D integer array-like of layer ids.
        iterations: Number of passes (values below 1 are treated as 1).

    Returns:
        New 2-D integer NumPy array with the same shape.
    """
    result = np.array(grid, dtype=np.int64, copy=True)
    if result.size == 0:
        return result
    for i in range(max(1, int(iterations))):
        updated = smooth_step(result)
        changed = int(np.count_nonzero(updated != result))
        result = updated
        log.debug("Grid smoothing pass %d changed %d cells", i + 1, changed)
        if changed == 0:
            break
    return result
