"""
Jarbook - Source Package

A personal finance tracker for logging expenses and debts, budgeting
regular income into percentage jars, and summarizing spending by
month and year.

DESIGN PRINCIPLES:
1. All arithmetic lives in the pure engine, never in presentation
2. Storage is an opaque, swappable collaborator
3. Every mutation is persisted first, then the whole state is reloaded
4. Numbers shown to the user are never NaN
"""

__version__ = "1.0.0"
__author__ = "Jarbook Team"
