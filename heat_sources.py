# heat_sources.py

import logging
from collections import namedtuple

logger = logging.getLogger("heat_sim")

# A fixed-temperature pinned cell, in grid coordinates (x = column, y = row).
HeatSource = namedtuple('HeatSource', ['x', 'y', 'temperature'])


class HeatSourceRegistry:
    """
    Ordered collection of heat sources bound to one mesh.

    Sources are kept in insertion order. Solvers reapply them in that order,
    so when two sources share a cell the later one wins. Adding a source also
    stamps it into the mesh right away so the fields are consistent before the
    next solver pass.
    """
    def __init__(self, mesh):
        self.mesh = mesh
        self._sources = []

    def add(self, x: int, y: int, temperature: float) -> bool:
        """
        Appends a source and stamps it into the mesh.

        - Inputs: x, y (int) grid column and row; temperature (float).
        - Outputs: True if the source was added, False if (x, y) is off the mesh.
        - Side Effects: Writes the current temperature buffer and the eikonal
          field at [y, x].
        """
        if not self.mesh.contains(x, y):
            return False

        source = HeatSource(int(x), int(y), float(temperature))
        self._sources.append(source)
        self.mesh.temperature[source.y, source.x] = source.temperature
        self.mesh.eikonal[source.y, source.x] = 0.0
        logger.debug(f"Heat source added: {source}")
        return True

    def clear(self):
        """Empties the registry. The mesh is left untouched."""
        self._sources.clear()

    def all(self) -> tuple:
        return tuple(self._sources)

    def __iter__(self):
        return iter(self._sources)

    def __len__(self):
        return len(self._sources)
