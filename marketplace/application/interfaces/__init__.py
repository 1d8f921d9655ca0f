"""
Application interfaces package.
"""
