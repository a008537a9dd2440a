"""
CLI — Click commands exposed by the `mirrorgate` entry point.
"""
