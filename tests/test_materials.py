"""Unit tests for material constants"""

import pytest

from materials import IRON, MATERIALS, MaterialProperties, get_material


def test_iron_properties():
    assert IRON.name == 'iron'
    assert IRON.thermal_conductivity == 80.4
    assert IRON.density == 7874.0
    assert IRON.specific_heat == 449.0
    assert IRON.thermal_diffusivity == 2.3e-5
    assert IRON.melting_point == 1538.0


def test_material_is_immutable():
    with pytest.raises(AttributeError):
        IRON.thermal_diffusivity = 1.0


def test_get_material_is_case_insensitive():
    assert get_material('Iron') is IRON
    assert get_material('IRON') is MATERIALS['iron']


def test_get_material_unknown_name():
    with pytest.raises(KeyError, match="unobtainium"):
        get_material('unobtainium')


def test_custom_material_can_coexist():
    copper = MaterialProperties('copper', 401.0, 8960.0, 385.0, 1.11e-4, 1085.0)
    assert copper.thermal_diffusivity != IRON.thermal_diffusivity
    assert IRON.thermal_diffusivity == 2.3e-5
