"""Infrastructure layer: key-value persistence and translation backends.

May import from domain. Must never import from services, commands, or config.
"""
