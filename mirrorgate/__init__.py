"""
mirrorgate — Mirror replication and push-status tracking for a
repository-hosting gateway.
"""

__version__ = "0.1.0"
