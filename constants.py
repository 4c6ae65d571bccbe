# constants.py
"""
Application-level constants.

These values are static and do not change between simulation runs.
They are fundamental to the application's framework, such as the shape of
the force law, the fixed integration step, the ranges exposed to the
control panel, and rendering properties.
"""

# --- Physics ---
# Normalised distance below which every pair repels, regardless of type.
BETA = 0.3
# Fixed integration step in seconds. Not exposed to the control panel.
TIME_STEP = 0.02

# Defaults used when config.json omits a simulation parameter.
DEFAULT_SIMULATION_PARAMETERS = {
    "particle_count": 2000,
    "type_count": 6,
    "max_distance_fraction": 0.1,
    "force_factor": 10.0,
    "friction_half_life": 0.04,
    "box_size": 2.0,
    "time_step": TIME_STEP,
    "seed": None,
}

# --- Control Panel Ranges ---
# (minimum, maximum, step) for each knob exposed to the user. These are
# policy of the control panel only; the simulation core checks positivity.
CONTROL_RANGES = {
    "max_distance_fraction": (0.01, 1.0, 0.01),
    "force_factor": (0.1, 20.0, 0.1),
    "friction_half_life": (0.01, 1.0, 0.01),
    "particle_count": (100, 5000, 100),
    "type_count": (2, 20, 1),
    "box_size": (1.0, 10.0, 0.1),
}

# --- Visualization settings ---
WINDOW_WIDTH = 1400
WINDOW_HEIGHT = 800
UI_PANEL_WIDTH = 300
FPS = 60
BACKGROUND_COLOR = (0, 0, 0)
BOX_EDGE_COLOR = (255, 255, 255)
DEFAULT_PARTICLE_RADIUS = 2
# Alpha for the UI panel background
UI_BACKGROUND_ALPHA = 100

# --- Camera ---
# Distance from the eye to the box centre, in box-size units.
CAMERA_DISTANCE = 2.0
# Projection scale at unit depth, in half-heights of the drawing area.
CAMERA_FOCAL_LENGTH = 1.3
DEFAULT_CAMERA_YAW = 0.6
DEFAULT_CAMERA_PITCH = 0.4
# Radians of rotation per pixel of mouse drag.
CAMERA_DRAG_SENSITIVITY = 0.01
