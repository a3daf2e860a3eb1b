"""
Pytest configuration and shared fixtures
"""

import pytest
import sys
import os

# Add backend directory to Python path
sys.path.insert(0, os.path.dirname(os.path.dirname(os.path.abspath(__file__))))

# Import all fixtures from grid_fixtures
from tests.fixtures.grid_fixtures import (
    flat_grid,
    random_grid,
    noise_grid,
    walled_grid,
    small_config,
    flat_session,
)

# Re-export all fixtures
__all__ = [
    'flat_grid',
    'random_grid',
    'noise_grid',
    'walled_grid',
    'small_config',
    'flat_session',
]
