"""Unit tests for the presentation-layer color mapping"""

import numpy as np
import pygame
import pytest

import constants
from renderer import FieldRenderer, eikonal_to_display_temperature, temperature_to_rgb


def test_ambient_maps_to_dark_blue():
    rgb = temperature_to_rgb(np.array([[20.0]]), 20.0, 1000.0)
    assert tuple(rgb[0, 0]) == (0, 0, 128)


def test_midpoint_maps_to_cyan():
    rgb = temperature_to_rgb(np.array([[510.0]]), 20.0, 1000.0)
    assert tuple(rgb[0, 0]) == (0, 255, 255)


def test_hottest_maps_to_red_and_clips():
    rgb = temperature_to_rgb(np.array([[1000.0, 5000.0]]), 20.0, 1000.0)
    assert tuple(rgb[0, 0]) == (255, 0, 0)
    assert tuple(rgb[0, 1]) == (255, 0, 0)


def test_non_finite_temperatures_are_sanitized():
    rgb = temperature_to_rgb(np.array([[np.nan, -np.inf, -50.0]]), 20.0, 1000.0)
    assert rgb.dtype == np.uint8
    for k in range(3):
        assert tuple(rgb[0, k]) == (0, 0, 128)


def test_eikonal_display_temperature():
    distance = np.array([[0.0, np.inf, 1000.0]])
    display = eikonal_to_display_temperature(distance, 20.0, 1000.0)
    assert display[0, 0] == 1000.0
    assert display[0, 1] == 20.0
    assert display[0, 2] == 20.0


def test_screen_to_grid():
    pygame.font.init()
    renderer = FieldRenderer(50)
    cell = renderer.cell_size
    offset = constants.FIELD_OFFSET

    assert renderer.screen_to_grid(offset, offset) == (0, 0)
    assert renderer.screen_to_grid(int(offset + 3.5 * cell), int(offset + 10.5 * cell)) == (3, 10)
    # Clicks left of the field land off-mesh
    assert renderer.screen_to_grid(offset - 5, offset)[0] < 0
