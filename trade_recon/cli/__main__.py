"""
Entry point for python -m trade_recon.cli
"""

from .journal import cli

if __name__ == '__main__':
    cli()
