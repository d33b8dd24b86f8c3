"""
Trade-Recon - Trade Reconciliation and Journal Import

Rebuilds round-trip trades from platform execution exports and merges
them into a per-account trade journal without duplicating entries.
"""

__version__ = "0.3.0"
__author__ = "Trade-Recon Team"
