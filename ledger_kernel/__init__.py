"""
Ledger Kernel

General-ledger core for a microfinance platform:
- Pure double-entry journal validation and balancing
- Chart-of-accounts hierarchy paths
- Field-level change tracking for account updates
- Posting of validated entries through SQLAlchemy
- Collection-sheet bulk deposits with per-line failure reports
"""

__version__ = "0.1.0"
