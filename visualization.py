# visualization.py
"""
Handles the visualization of the particle simulation using Pygame.

The Visualizer is a client of the SimulationController: it draws the
current snapshot and turns button clicks and wheel edits into
start/stop/reset calls. It never writes to the simulation arrays.
"""
import logging
import math
from typing import List, Optional, Tuple

import numpy as np
import pygame

from constants import (
    BACKGROUND_COLOR, BOX_EDGE_COLOR, CAMERA_DISTANCE, CAMERA_DRAG_SENSITIVITY,
    CAMERA_FOCAL_LENGTH, CONTROL_RANGES, DEFAULT_CAMERA_PITCH, DEFAULT_CAMERA_YAW,
    DEFAULT_PARTICLE_RADIUS, FPS, UI_BACKGROUND_ALPHA, UI_PANEL_WIDTH,
    WINDOW_HEIGHT, WINDOW_WIDTH
)
from controller import SimulationController, Snapshot
from parameters import InvalidConfigError

# --- Data Contracts ---
#
# rotate_points(points: np.ndarray, yaw: float, pitch: float) -> np.ndarray:
#   - Inputs: (N, 3) array. Yaw turns about the vertical axis, pitch about
#     the horizontal screen axis.
#   - Outputs: (N, 3) rotated copy; lengths are preserved.
#
# project_points(points, box_size, yaw, pitch, center, half_height)
#     -> Tuple[np.ndarray, np.ndarray]:
#   - Outputs: (N, 2) screen coordinates and (N,) depths (larger is farther).
#
# class ParameterControl:
#   - nudge(self, direction: int) -> None: moves the pending value by one
#     step, snapped to the step grid and clamped to [minimum, maximum].
#
# class Visualizer:
#   - __init__(self, controller: SimulationController, vis_params: Optional[dict] = None)
#     - Side Effects: Initializes Pygame and creates a display surface.
#   - draw(self) -> bool:
#     - Outputs: False if the user has quit, True otherwise.
#     - Side Effects: Renders particles and UI, handles Pygame events, and
#       may call start(), stop() or reset() on the controller.

# Pairs of corner indices forming the twelve edges of the box.
BOX_EDGES = [
    (0, 1), (2, 3), (4, 5), (6, 7),
    (0, 2), (1, 3), (4, 6), (5, 7),
    (0, 4), (1, 5), (2, 6), (3, 7),
]

PARAMETER_LABELS = {
    "max_distance_fraction": "Max Distance",
    "force_factor": "Force Factor",
    "friction_half_life": "Friction Half Life",
    "particle_count": "Particle Population",
    "type_count": "Particle Types",
    "box_size": "Box Size",
}


def box_corners(half_box: float) -> np.ndarray:
    """The eight corners of the cube, ordered by the bits of the index."""
    return np.array([
        [-half_box if not (i & 4) else half_box,
         -half_box if not (i & 2) else half_box,
         -half_box if not (i & 1) else half_box]
        for i in range(8)
    ], dtype=np.float64)


def rotate_points(points: np.ndarray, yaw: float, pitch: float) -> np.ndarray:
    cos_y, sin_y = math.cos(yaw), math.sin(yaw)
    cos_p, sin_p = math.cos(pitch), math.sin(pitch)
    yaw_matrix = np.array([
        [cos_y, 0.0, sin_y],
        [0.0, 1.0, 0.0],
        [-sin_y, 0.0, cos_y],
    ])
    pitch_matrix = np.array([
        [1.0, 0.0, 0.0],
        [0.0, cos_p, -sin_p],
        [0.0, sin_p, cos_p],
    ])
    return points @ (pitch_matrix @ yaw_matrix).T


def project_points(
    points: np.ndarray, box_size: float, yaw: float, pitch: float,
    center: Tuple[float, float], half_height: float
) -> Tuple[np.ndarray, np.ndarray]:
    """
    Perspective projection of world points onto the drawing area.

    Points are scaled by box_size first so the box fills the same portion
    of the screen for any box size.
    """
    rotated = rotate_points(points / box_size, yaw, pitch)
    depth = np.maximum(rotated[:, 2] + CAMERA_DISTANCE, 1e-6)
    scale = CAMERA_FOCAL_LENGTH * half_height / depth
    screen = np.empty((len(points), 2), dtype=np.float64)
    screen[:, 0] = center[0] + rotated[:, 0] * scale
    # Screen y grows downwards.
    screen[:, 1] = center[1] - rotated[:, 1] * scale
    return screen, depth


def make_type_colors(type_count: int, config_colors: Optional[list] = None) -> List[pygame.Color]:
    """
    One colour per type: configured colours first, then evenly spaced hues
    at full saturation and half lightness.
    """
    colors = []
    for rgb in (config_colors or [])[:type_count]:
        try:
            colors.append(pygame.Color(tuple(rgb) if isinstance(rgb, list) else rgb))
        except (ValueError, TypeError) as e:
            logging.error(f"Could not parse particle color {rgb!r}: {e}. Using generated hues instead.")
            colors = []
            break

    for i in range(len(colors), type_count):
        color = pygame.Color(0, 0, 0)
        color.hsla = (360.0 * i / type_count, 100, 50, 100)
        colors.append(color)
    return colors


class ParameterControl:
    """A pending value for one exposed knob, edited one step at a time."""

    def __init__(self, key: str, value: float):
        self.key = key
        self.label = PARAMETER_LABELS.get(key, key.replace('_', ' ').title())
        self.minimum, self.maximum, self.step = CONTROL_RANGES[key]
        self.is_integer = isinstance(self.step, int)
        self.value = self._constrain(value)

    def _constrain(self, value: float):
        steps = round((value - self.minimum) / self.step)
        snapped = self.minimum + steps * self.step
        snapped = min(max(snapped, self.minimum), self.maximum)
        if self.is_integer:
            return int(snapped)
        # Trim float noise from repeated step arithmetic.
        return round(snapped, 6)

    def nudge(self, direction: int) -> None:
        self.value = self._constrain(self.value + direction * self.step)

    def format_value(self) -> str:
        if self.is_integer:
            return str(self.value)
        return f"{self.value:.2f}"


class Visualizer:
    """
    Renders the current generation and provides the control panel.
    """
    def __init__(self, controller: SimulationController, vis_params: Optional[dict] = None):
        """
        Initializes Pygame and the display window.
        """
        vis_params = vis_params if vis_params is not None else {}
        self.controller = controller

        pygame.init()
        pygame.font.init()

        width = vis_params.get('window_width', WINDOW_WIDTH)
        height = vis_params.get('window_height', WINDOW_HEIGHT)
        self.screen = pygame.display.set_mode((width, height))
        pygame.display.set_caption("Particle Life 3D")
        self.clock = pygame.time.Clock()

        # The simulation area is the total width minus the UI panel
        self.sim_width = width - UI_PANEL_WIDTH
        self.sim_height = height
        self.sim_center = (self.sim_width / 2.0, self.sim_height / 2.0)

        self.ui_panel_surface = pygame.Surface((UI_PANEL_WIDTH, self.sim_height), pygame.SRCALPHA)
        self.ui_panel_surface.fill((40, 40, 40, UI_BACKGROUND_ALPHA))

        self.config_colors = vis_params.get('particle_colors')
        self.colors = make_type_colors(controller.config.type_count, self.config_colors)

        self.yaw = DEFAULT_CAMERA_YAW
        self.pitch = DEFAULT_CAMERA_PITCH
        self.dragging = False

        try:
            self.font_main = pygame.font.SysFont("Segoe UI", 14)
            self.font_main_bold = pygame.font.SysFont("Segoe UI", 14, bold=True)
        except pygame.error:
            logging.warning("Segoe UI font not found, falling back to default sans-serif.")
            self.font_main = pygame.font.SysFont(None, 18)
            self.font_main_bold = pygame.font.SysFont(None, 18, bold=True)

        # --- Button Configuration ---
        panel_x = self.sim_width + 20
        button_width = UI_PANEL_WIDTH - 40
        self.buttons = {}
        for index, name in enumerate(("Start", "Stop", "Reset", "Camera Reset")):
            self.buttons[name] = pygame.Rect(panel_x, 20 + index * 36, button_width, 30)

        # --- Parameter Rows ---
        config = controller.config
        self.parameters = [ParameterControl(key, getattr(config, key)) for key in CONTROL_RANGES]
        rows_top = 20 + len(self.buttons) * 36 + 20
        self.parameter_rects = [
            pygame.Rect(panel_x, rows_top + index * 34, button_width, 30)
            for index in range(len(self.parameters))
        ]

        self.button_color = (80, 80, 80)
        self.button_hover_color = (110, 110, 110)
        self.text_color_title = (255, 255, 255)
        self.text_color_key = (200, 200, 200)
        self.param_box_color = (60, 60, 60)

        logging.info(f"Visualizer initialized with Pygame display ({width}x{height}).")

    def _apply_pending_parameters(self) -> None:
        changes = {control.key: control.value for control in self.parameters}
        new_config = self.controller.config.with_changes(**changes)
        try:
            self.controller.reset(new_config)
        except InvalidConfigError as e:
            logging.error(f"Reset rejected, keeping the current generation: {e}")
            return
        self.colors = make_type_colors(new_config.type_count, self.config_colors)

    def _handle_click(self, mouse_pos: Tuple[int, int]) -> None:
        if self.buttons["Start"].collidepoint(mouse_pos):
            self.controller.start()
        elif self.buttons["Stop"].collidepoint(mouse_pos):
            self.controller.stop()
        elif self.buttons["Reset"].collidepoint(mouse_pos):
            self._apply_pending_parameters()
        elif self.buttons["Camera Reset"].collidepoint(mouse_pos):
            self.yaw = DEFAULT_CAMERA_YAW
            self.pitch = DEFAULT_CAMERA_PITCH
            logging.info("Camera reset to the default view.")
        elif mouse_pos[0] < self.sim_width:
            self.dragging = True

    def _handle_wheel(self, mouse_pos: Tuple[int, int], direction: int) -> None:
        for control, rect in zip(self.parameters, self.parameter_rects):
            if rect.collidepoint(mouse_pos):
                old_value = control.value
                control.nudge(direction)
                if control.value != old_value:
                    logging.info(
                        f"Pending {control.label} changed from {old_value} to "
                        f"{control.value}; press Reset to apply."
                    )
                return

    def _handle_events(self) -> bool:
        mouse_pos = pygame.mouse.get_pos()
        for event in pygame.event.get():
            if event.type == pygame.QUIT:
                logging.info("Quit event received. Shutting down visualizer.")
                return False

            if event.type == pygame.KEYDOWN:
                if event.key == pygame.K_ESCAPE:
                    logging.info("ESC key pressed. Shutting down visualizer.")
                    return False
                if event.key == pygame.K_SPACE:
                    self.controller.toggle()

            if event.type == pygame.MOUSEBUTTONDOWN and event.button == 1:
                self._handle_click(mouse_pos)

            if event.type == pygame.MOUSEBUTTONUP and event.button == 1:
                self.dragging = False

            if event.type == pygame.MOUSEMOTION and self.dragging:
                dx, dy = event.rel
                self.yaw += dx * CAMERA_DRAG_SENSITIVITY
                self.pitch = min(max(self.pitch + dy * CAMERA_DRAG_SENSITIVITY, -math.pi / 2), math.pi / 2)

            # event.y is 1 for scroll up, -1 for scroll down
            if event.type == pygame.MOUSEWHEEL:
                self._handle_wheel(mouse_pos, event.y)
        return True

    def _draw_box(self, box_size: float) -> None:
        corners, _ = project_points(
            box_corners(box_size / 2.0), box_size, self.yaw, self.pitch,
            self.sim_center, self.sim_height / 2.0
        )
        for a, b in BOX_EDGES:
            pygame.draw.line(self.screen, BOX_EDGE_COLOR, tuple(corners[a]), tuple(corners[b]), 1)

    def _draw_particles(self, snapshot: Snapshot) -> None:
        if snapshot.type_count != len(self.colors):
            self.colors = make_type_colors(snapshot.type_count, self.config_colors)

        screen_pos, depth = project_points(
            snapshot.positions, snapshot.box_size, self.yaw, self.pitch,
            self.sim_center, self.sim_height / 2.0
        )
        # Painter's algorithm: far particles first.
        for i in np.argsort(-depth):
            x, y = screen_pos[i]
            if 0 <= x < self.sim_width and 0 <= y < self.sim_height:
                pygame.draw.circle(
                    self.screen,
                    self.colors[snapshot.types[i] % len(self.colors)],
                    (int(x), int(y)),
                    DEFAULT_PARTICLE_RADIUS
                )

    def _draw_buttons(self, mouse_pos: Tuple[int, int]) -> None:
        for name, rect in self.buttons.items():
            is_hovered = rect.collidepoint(mouse_pos)
            color = self.button_hover_color if is_hovered else self.button_color
            pygame.draw.rect(self.screen, color, rect, border_radius=5)
            text_surf = self.font_main.render(name, True, self.text_color_title)
            self.screen.blit(text_surf, text_surf.get_rect(center=rect.center))

    def _draw_parameters(self, snapshot: Snapshot) -> None:
        for control, rect in zip(self.parameters, self.parameter_rects):
            pygame.draw.rect(self.screen, self.param_box_color, rect, border_radius=6)
            key_surf = self.font_main_bold.render(control.label, True, self.text_color_key)
            value_surf = self.font_main.render(control.format_value(), True, self.text_color_title)
            self.screen.blit(key_surf, key_surf.get_rect(midleft=(rect.left + 8, rect.centery)))
            self.screen.blit(value_surf, value_surf.get_rect(midright=(rect.right - 8, rect.centery)))

        status = "Running" if self.controller.is_running else "Stopped"
        lines = [
            f"{status} | step {snapshot.step_count}",
            f"{snapshot.particle_count} particles, {snapshot.type_count} types",
            f"{self.clock.get_fps():.1f} FPS",
        ]
        y = self.parameter_rects[-1].bottom + 20
        for line in lines:
            surf = self.font_main.render(line, True, self.text_color_key)
            self.screen.blit(surf, (self.parameter_rects[-1].left, y))
            y += self.font_main.get_linesize()

    def draw(self) -> bool:
        """
        Handles events, then draws the current generation and UI.

        Returns:
            bool: False if the simulation should exit, True otherwise.
        """
        if not self._handle_events():
            return False

        # Events may have replaced the generation; always draw a fresh snapshot.
        snapshot = self.controller.snapshot()

        self.screen.fill(BACKGROUND_COLOR)
        self._draw_box(snapshot.box_size)
        self._draw_particles(snapshot)

        self.screen.blit(self.ui_panel_surface, (self.sim_width, 0))
        self._draw_buttons(pygame.mouse.get_pos())
        self._draw_parameters(snapshot)

        pygame.display.flip()
        self.clock.tick(FPS)
        return True

    def close(self):
        """Shuts down Pygame."""
        pygame.font.quit()
        pygame.quit()
