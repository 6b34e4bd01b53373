"""
CLI module for RBF-DRT.

This module provides the command-line interface components:
- logging: Custom log formatters and setup
- parser: Argument parsing
- data_handling: Data loading and filtering
- handlers: Analysis workflow handlers
- utils: Helper functions and dataclasses

The main entry point is in the root rbfdrt.py script.
"""

from .logging import setup_logging, log_separator
from .parser import parse_arguments, build_parser
from .data_handling import load_eis_data, filter_by_frequency
from .handlers import run_drt_analysis, run_plotting
from .utils import LoadedData, save_figure

__all__ = [
    # Logging
    'setup_logging',
    'log_separator',
    # Parser
    'parse_arguments',
    'build_parser',
    # Data handling
    'load_eis_data',
    'filter_by_frequency',
    # Handlers
    'run_drt_analysis',
    'run_plotting',
    # Utils
    'LoadedData',
    'save_figure',
]
