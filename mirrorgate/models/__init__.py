"""
Models — Caller context and persisted status schemas.
"""
