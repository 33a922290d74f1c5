"""
CLI Module - Command-line interface for Jobsite.

Provides commands for:
- Replaying staffing scenarios
- Quoting task costs
"""

from .main import cli
from .scenario_commands import run, quote, register_commands

__all__ = ['cli', 'run', 'quote', 'register_commands']
