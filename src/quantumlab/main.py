"""
Application Initialization
==========================
This module constructs the simulation, the main window and starts the Qt
event loop.

Why is this file needed?
------------------------
It acts as the "Dependency Injection" root. It:
1. Parses the command line and sets up logging.
2. Instantiates the Simulation (model) with the desktop feedback device.
3. Instantiates the Main Window (view) and passes the simulation into it.
4. Prevents circular import errors by being the orchestrator.
"""
import argparse
import logging
import sys
from typing import Optional, Sequence

import numpy as np

from quantumlab.app.application import create_app
from quantumlab.app.feedback import QtFeedback
from quantumlab.app.main_window import MainWindow
from quantumlab.logging_config import setup_logging
from quantumlab.model.simulation import Simulation

import pyqtgraph as pg


def parse_args(argv: Optional[Sequence[str]] = None) -> argparse.Namespace:
    parser = argparse.ArgumentParser(prog="quantumlab", description="Interactive quantum field simulation.")
    parser.add_argument("--debug", action="store_true", help="log everything (DEBUG level)")
    parser.add_argument("--log-file", default=None, help="also write the log to this file")
    parser.add_argument("--seed", type=int, default=None, help="seed for the random generator")
    return parser.parse_args(argv)


def main(argv: Optional[Sequence[str]] = None) -> int:
    args = parse_args(argv)

    # 1. Setup Logging (Console + Optional File)
    setup_logging(level=logging.DEBUG if args.debug else logging.INFO, log_file=args.log_file)

    # 2. Create the Qt Application
    app = create_app()
    pg.setConfigOption("background", "w")
    pg.setConfigOption("foreground", "k")

    # 3. Initialize the Simulation
    simulation = Simulation(rng=np.random.default_rng(args.seed), device=QtFeedback())

    # 4. Initialize the Main Window, passing the model
    window = MainWindow(simulation)
    window.show()

    # 5. Start Event Loop
    return app.exec()


if __name__ == "__main__":
    sys.exit(main())
