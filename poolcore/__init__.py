"""
poolcore: deterministic transition engine for a constant-product ADA/token pool.
"""

__version__ = "0.1.0"
