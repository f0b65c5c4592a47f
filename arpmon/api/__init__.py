"""
HTTP query API for the host table.
"""

from .routes import create_blueprint

__all__ = ['create_blueprint']
