"""
Background processing package.
"""
