"""
Debt Tracker - Source Package

A personal-finance ledger for tracking income, expenses, money lent to
friends, repayments and split bills, with an automatic monthly salary credit.

DESIGN PRINCIPLES:
1. Validate first, mutate second
2. Balances are always recomputed from the transaction list
3. Friend debts change only through recorded transactions
4. Every mutation is persisted before the UI redraws
5. Storage layer is swappable
"""

__version__ = "1.0.0"
__author__ = "Debt Tracker Team"
