"""Tests for configuration loading and logging setup."""

from __future__ import annotations

import json
import logging
import logging.handlers

import numpy as np
import pytest

from utils import average_speed, load_config, setup_logging


def test_load_config_reads_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text(json.dumps({"simulation_parameters": {"particle_count": 10}}))
    assert load_config(str(path)) == {"simulation_parameters": {"particle_count": 10}}


def test_load_config_missing_file(tmp_path) -> None:
    with pytest.raises(FileNotFoundError):
        load_config(str(tmp_path / "absent.json"))


def test_load_config_bad_json(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("{not json")
    with pytest.raises(json.JSONDecodeError):
        load_config(str(path))


def test_load_config_requires_object(tmp_path) -> None:
    path = tmp_path / "config.json"
    path.write_text("[1, 2, 3]")
    with pytest.raises(ValueError):
        load_config(str(path))


def test_repository_config_is_loadable(project_root) -> None:
    config = load_config(str(project_root / "config.json"))
    assert "simulation_parameters" in config
    assert "logging" in config


def test_setup_logging_adds_rotating_file(tmp_path, restore_root_logger) -> None:
    log_file = tmp_path / "nested" / "run.log"
    setup_logging({"logging": {"level": "debug", "log_file": str(log_file)}})

    root = restore_root_logger
    assert root.level == logging.DEBUG
    assert any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)
    assert log_file.parent.is_dir()


def test_setup_logging_console_only(restore_root_logger) -> None:
    setup_logging({"logging": {"level": "WARNING", "log_file": None}})

    root = restore_root_logger
    assert root.level == logging.WARNING
    assert len(root.handlers) == 1
    assert not any(isinstance(h, logging.handlers.RotatingFileHandler) for h in root.handlers)


def test_average_speed() -> None:
    velocities = np.array([[3.0, 4.0, 0.0], [0.0, 0.0, 1.0]])
    assert average_speed(velocities) == pytest.approx(3.0)
    assert average_speed(np.zeros((0, 3))) == 0.0
