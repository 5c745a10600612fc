"""
Project addon.

Exports its lifecycle hooks by name; the loader reads manifest.yaml
next to this file for everything else.
"""

from .services import cleanup, initialize

__all__ = ['initialize', 'cleanup']
