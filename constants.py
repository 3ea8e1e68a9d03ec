# constants.py

"""
Application Constants

This module defines static configuration values for the presentation layer
(window, colors, frame rate). Simulation parameters live in config.json.

Data Contract:
- All values are immutable constants.
- Units are specified in comments where applicable.
"""

# Screen dimensions
WIDTH = 1000  # Pixels
HEIGHT = 800  # Pixels

# The field is drawn this far from the top-left corner of the window.
FIELD_OFFSET = 50  # Pixels

# Height reserved at the bottom of the window for the status panel.
STATUS_PANEL_HEIGHT = 100  # Pixels

# Framerate
FPS = 60  # Frames per second

# Colors (RGB)
BACKGROUND = (20, 20, 30)
WHITE = (255, 255, 255)
PANEL_COLOR = (100, 100, 100)
TEXT_COLOR = (230, 230, 230)

# Window Title
TITLE = "Heat Diffusion Simulation - Iron Mesh"

# Status text
FONT_SIZE = 20

# Color Mapping for Visualization
# Upper edges of the normalized temperature bands.
# Blue -> cyan -> green -> yellow -> red, hottest last.
COLOR_BAND_EDGES = (0.25, 0.5, 0.75, 0.9)

# Arrival-time to display-temperature decay used when showing the eikonal field.
EIKONAL_DISPLAY_DECAY = 0.1
