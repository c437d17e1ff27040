"""
Personal Ledger - Source Package

A small personal-finance ledger that tracks accounts, expenses,
earnings and asset holdings in flat delimited files.

DESIGN PRINCIPLES:
1. Every record has a stable guid and a process-local id
2. Nothing is written unless something changed
3. Destructive operations never break references
4. Account history is kept by versioning, not by editing
5. Every mutation is auditable
"""

__version__ = "1.0.0"
__author__ = "Personal Ledger Team"
