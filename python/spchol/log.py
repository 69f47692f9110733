#!/usr/bin/env python3
# =============================================================================
#     File: log.py
#  Created: 2025-07-02 09:12
#   Author: Bernie Roesler
#
"""
Package logger for spchol.
"""
# =============================================================================

import logging

logger = logging.getLogger("spchol")
logger.addHandler(logging.NullHandler())

# =============================================================================
# =============================================================================
