# main.py
"""
Main entry point for the 3D Particle Life simulation.

This script orchestrates the entire simulation lifecycle:
1. Loads configuration from `config.json`.
2. Initializes the logging system.
3. Builds the simulation controller and its first generation.
4. Runs the main loop, either in a window or headless.
5. Handles clean shutdown.
"""
import logging
import sys
from utils import setup_logging, load_config, average_speed
import cProfile
import pstats
import io

from parameters import SimulationConfig, InvalidConfigError
from controller import SimulationController


def _log_progress(controller: SimulationController, tick_num: int, log_throttle: int) -> None:
    # Hot loops must throttle logs
    if log_throttle <= 0 or tick_num % log_throttle != 0:
        return
    snapshot = controller.snapshot()
    logging.info(f"Tick {tick_num} | simulation step {snapshot.step_count} | {controller.state.value}")
    logging.debug(
        f"Tick {tick_num} | Average Velocity: "
        f"{average_speed(controller.simulation.particles.velocities):.4f}"
    )


def run_headless(controller: SimulationController, max_steps: int, log_throttle: int) -> None:
    """Steps the simulation max_steps times without a window."""
    controller.start()
    for tick_num in range(1, max_steps + 1):
        controller.tick()
        _log_progress(controller, tick_num, log_throttle)
    logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
    controller.stop()


def run_windowed(controller: SimulationController, vis_params: dict, max_steps: int, log_throttle: int, visualizer=None) -> None:
    """
    Ticks the simulation once per frame until the window closes.

    max_steps bounds the steps taken over the whole run, across resets.
    """
    if visualizer is None:
        from visualization import Visualizer
        visualizer = Visualizer(controller, vis_params)

    # Counts steps across resets; a generation's own step_count restarts at 0.
    steps_run = 0
    tick_num = 0
    try:
        while True:
            if controller.is_running:
                steps_run += 1
            controller.tick()
            tick_num += 1

            # The visualizer's draw method handles input and returns False
            # once the user quits.
            if not visualizer.draw():
                break

            _log_progress(controller, tick_num, log_throttle)

            if max_steps and steps_run >= max_steps:
                logging.info(f"Reached max_steps ({max_steps}). Stopping simulation.")
                break
    finally:
        visualizer.close()


def main(config_path: str = 'config.json') -> int:
    """
    The main function to run the simulation.
    """
    # Logging is not set up yet, so we use a print for this one error.
    try:
        config = load_config(config_path)
    except Exception as e:
        print(f"FATAL: Could not load {config_path}. Error: {e}")
        return 1

    setup_logging(config)

    logging.info("--- Particle Life Simulation Starting ---")

    sim_params = config.get('simulation_parameters', {})
    run_params = config.get('run_control', {})
    vis_params = config.get('visualization', {})

    try:
        controller = SimulationController(SimulationConfig.from_params(sim_params))
    except InvalidConfigError as e:
        logging.critical(f"Cannot start with the configured parameters: {e}")
        return 1

    if run_params.get('start_running', False):
        controller.start()

    log_throttle = run_params.get('log_throttle_steps', 100)
    max_steps = run_params.get('max_steps', 0)

    profiler = cProfile.Profile()
    profiler.enable()
    try:
        if run_params.get('headless', False):
            run_headless(controller, max_steps or 1000, log_throttle)
        else:
            run_windowed(controller, vis_params, max_steps, log_throttle)
    finally:
        profiler.disable()
        logging.info("Simulation loop finished.")

    logging.info("--- Performance Profile ---")
    s = io.StringIO()
    # Sort by cumulative time spent in the function
    stats = pstats.Stats(profiler, stream=s).sort_stats('cumtime')
    stats.print_stats(20)
    logging.info(f"\n{s.getvalue()}")

    logging.info("--- Particle Life Simulation Shutting Down ---")
    return 0


if __name__ == "__main__":
    sys.exit(main(*sys.argv[1:2]))
