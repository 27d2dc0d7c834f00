"""
Personal Ledger - Source Package

An owner-scoped income/expense ledger with monthly and yearly
spending summaries.

DESIGN PRINCIPLES:
1. Every ledger operation is scoped to the authenticated owner
2. Money is Decimal, never float
3. Period windows are half-open and always UTC
4. Fail fast with a typed error
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
