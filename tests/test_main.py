"""Tests for the entry point and its run loops."""

from __future__ import annotations

import json

import pytest

import main as main_module
from controller import SimulationController
from main import main, run_windowed
from parameters import SimulationConfig


def write_config(tmp_path, **sections) -> str:
    config = {
        "simulation_parameters": {
            "particle_count": 40,
            "type_count": 3,
            "max_distance_fraction": 0.3,
            "seed": 5,
        },
        "run_control": {"headless": True, "max_steps": 5, "log_throttle_steps": 2},
        "logging": {"level": "DEBUG", "log_file": None},
    }
    config.update(sections)
    path = tmp_path / "config.json"
    path.write_text(json.dumps(config))
    return str(path)


def test_headless_run_completes(tmp_path, restore_root_logger) -> None:
    assert main(write_config(tmp_path)) == 0


def test_missing_config_is_fatal(tmp_path, capsys) -> None:
    assert main(str(tmp_path / "absent.json")) == 1
    assert "FATAL" in capsys.readouterr().out


def test_invalid_parameters_are_fatal(tmp_path, restore_root_logger) -> None:
    path = write_config(tmp_path, simulation_parameters={"particle_count": 0})
    assert main(path) == 1


class ResettingViewer:
    """Stands in for the window: resets the controller every few frames."""

    def __init__(self, controller: SimulationController, reset_every: int):
        self.controller = controller
        self.reset_every = reset_every
        self.frames = 0
        self.closed = False

    def draw(self) -> bool:
        self.frames += 1
        if self.frames % self.reset_every == 0:
            self.controller.reset(self.controller.config)
        return True

    def close(self) -> None:
        self.closed = True


def test_windowed_max_steps_counts_across_resets(small_config: SimulationConfig) -> None:
    controller = SimulationController(small_config.with_changes(particle_count=20))
    controller.start()
    viewer = ResettingViewer(controller, reset_every=3)

    run_windowed(controller, {}, max_steps=7, log_throttle=0, visualizer=viewer)

    assert viewer.frames == 7
    assert viewer.closed


def test_windowed_stopped_frames_do_not_count(small_config: SimulationConfig) -> None:
    controller = SimulationController(small_config.with_changes(particle_count=20))
    viewer = ResettingViewer(controller, reset_every=100)
    frames = []

    def draw() -> bool:
        frames.append(controller.is_running)
        if len(frames) == 4:
            controller.start()
        return True

    viewer.draw = draw
    run_windowed(controller, {}, max_steps=3, log_throttle=0, visualizer=viewer)

    # Four stopped frames, then three running ones.
    assert frames == [False] * 4 + [True] * 3


class RecordingProfile:
    def __init__(self):
        self.enabled = False
        self.disabled = False

    def enable(self) -> None:
        self.enabled = True

    def disable(self) -> None:
        self.disabled = True


def test_profiler_disabled_when_loop_fails(tmp_path, monkeypatch, restore_root_logger) -> None:
    profile = RecordingProfile()
    monkeypatch.setattr(main_module.cProfile, "Profile", lambda: profile)

    def failing_loop(*args, **kwargs):
        raise RuntimeError("no display")

    monkeypatch.setattr(main_module, "run_windowed", failing_loop)
    path = write_config(tmp_path, run_control={"headless": False})

    with pytest.raises(RuntimeError):
        main(path)

    assert profile.enabled
    assert profile.disabled
