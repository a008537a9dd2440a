"""
Persistence — Append-only mirror event ledger.
"""
