"""
Config — Gateway settings and per-repository mirror options.
"""
