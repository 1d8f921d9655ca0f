"""
Infrastructure layer: persistence and external collaborators.
"""
