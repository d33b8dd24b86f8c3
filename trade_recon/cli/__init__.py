"""
CLI commands for the trade journal importer
"""

from .journal import cli

__all__ = ['cli']
