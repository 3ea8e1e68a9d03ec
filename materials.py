# materials.py

"""
Material Constants

This module defines the physical constants of the materials the simulator
can model. A material is an immutable record passed into the simulation at
construction, so several simulations with different materials can coexist.

Data Contract:
- All values are immutable once created.
- Units are specified in comments where applicable.
- Only thermal_diffusivity feeds the numerical model (the stencil coefficient
  and the propagation speed). The other values are informational.
"""

from collections import namedtuple

MaterialProperties = namedtuple('MaterialProperties', [
    'name',
    'thermal_conductivity',  # W/m·K
    'density',               # kg/m³
    'specific_heat',         # J/kg·K
    'thermal_diffusivity',   # m²/s
    'melting_point',         # °C
])

IRON = MaterialProperties(
    name='iron',
    thermal_conductivity=80.4,
    density=7874.0,
    specific_heat=449.0,
    thermal_diffusivity=2.3e-5,
    melting_point=1538.0,
)

MATERIALS = {
    IRON.name: IRON,
}


def get_material(name: str) -> MaterialProperties:
    """Looks up a material by name (case-insensitive)."""
    try:
        return MATERIALS[name.lower()]
    except KeyError:
        raise KeyError(f"Unknown material '{name}'. Known materials: {sorted(MATERIALS)}") from None
