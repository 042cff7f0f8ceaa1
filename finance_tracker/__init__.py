"""
Finance Tracker - Source Package

The data core of a personal finance tracker: transactions, recurring
payments, monthly statistics, local persistence and JSON backups.

DESIGN PRINCIPLES:
1. Records are validated when they are built, not when they are stored
2. Statistics are derived on demand, never cached
3. Every change is persisted, then audited
4. Storage is swappable
5. Corrupt saved data never stops the app from starting
"""

__version__ = "1.0.0"
__author__ = "Finance Tracker Team"
