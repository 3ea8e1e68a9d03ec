# eikonal_solver.py

import heapq
import logging
import math
import numba
import numpy as np

logger = logging.getLogger("heat_sim")

# 8-connected neighborhood: row offset, column offset and edge length.
_ROW_OFFSETS = np.array([-1, -1, -1, 0, 0, 1, 1, 1], dtype=np.int64)
_COL_OFFSETS = np.array([-1, 0, 1, -1, 1, -1, 0, 1], dtype=np.int64)
_EDGE_LENGTHS = np.array([
    math.sqrt(2.0), 1.0, math.sqrt(2.0),
    1.0, 1.0,
    math.sqrt(2.0), 1.0, math.sqrt(2.0),
])

# --- JIT-Compiled Dijkstra ---

@numba.jit(nopython=True)
def _dijkstra_jit(distance, speed, finalized, source_rows, source_cols):
    """
    Numba-accelerated multi-source Dijkstra over the 8-connected grid.

    Crossing into a cell costs edge_length / speed of that cell. The heap uses
    lazy deletion: stale entries for a cell that is already finalized are
    popped and discarded. Heap items are all-float tuples
    (distance, row, col) so their type stays homogeneous.
    Returns the number of finalized cells.
    """
    n = distance.shape[0]
    distance[:, :] = np.inf
    finalized[:, :] = False

    num_sources = source_rows.shape[0]
    if num_sources == 0:
        return 0

    # The heap must be seeded with one item so Numba can infer its type.
    heap = [(0.0, float(source_rows[0]), float(source_cols[0]))]
    distance[source_rows[0], source_cols[0]] = 0.0
    for k in range(1, num_sources):
        distance[source_rows[k], source_cols[k]] = 0.0
        heapq.heappush(heap, (0.0, float(source_rows[k]), float(source_cols[k])))

    finalized_count = 0
    while len(heap) > 0:
        current_distance, row_f, col_f = heapq.heappop(heap)
        row = int(row_f)
        col = int(col_f)

        if finalized[row, col]:
            continue
        finalized[row, col] = True
        finalized_count += 1

        for k in range(8):
            nr = row + _ROW_OFFSETS[k]
            nc = col + _COL_OFFSETS[k]
            if 0 <= nr < n and 0 <= nc < n and not finalized[nr, nc]:
                candidate = current_distance + _EDGE_LENGTHS[k] / speed[nr, nc]
                if candidate < distance[nr, nc]:
                    distance[nr, nc] = candidate
                    heapq.heappush(heap, (candidate, float(nr), float(nc)))

    return finalized_count


class EikonalSolver:
    """
    Recomputes the first-arrival-time field from every heat source.

    The whole field is rebuilt on each call; adding a single source does not
    trigger an incremental re-solve. Cells no source can reach keep np.inf,
    which only happens when the registry is empty.
    """
    def __init__(self, mesh, sources):
        self.mesh = mesh
        self.sources = sources
        self._finalized = np.zeros((mesh.size, mesh.size), dtype=np.bool_)

    def solve(self) -> int:
        source_rows = np.array([source.y for source in self.sources], dtype=np.int64)
        source_cols = np.array([source.x for source in self.sources], dtype=np.int64)

        finalized_count = _dijkstra_jit(
            self.mesh.eikonal,
            self.mesh.propagation_speed,
            self._finalized,
            source_rows,
            source_cols
        )
        logger.debug(f"Eikonal solve finalized {finalized_count} cells from {len(source_rows)} source(s).")
        return finalized_count
