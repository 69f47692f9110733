#!/usr/bin/env python3
# =============================================================================
#     File: conftest.py
#  Created: 2025-07-09 08:40
#   Author: Bernie Roesler
#
"""
Configuration file for pytest to set up the testing environment.
"""
# =============================================================================

import matplotlib

# Tests never open a window
matplotlib.use('Agg')


def pytest_addoption(parser):
    """Add command-line options for pytest."""
    parser.addoption(
        "--make-figures",
        action="store_true",
        default=False,
        help="Save the figures made by the plotting tests to test_figures/."
    )


def pytest_configure(config):
    """Register the markers used by the spchol tests."""
    config.addinivalue_line(
        "markers",
        "random: tests parametrized over randomly generated matrices"
    )

# =============================================================================
# =============================================================================
