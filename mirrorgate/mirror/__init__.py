"""
Mirror — Replicate repositories to slave hosts and track failed pushes.

This package resolves each repository's slaves, runs full-mirror pushes,
and keeps one status record per (repository, slave) whose last push
ended fatally.
"""
