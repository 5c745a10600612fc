"""
Addon System Signals

Django signals for addon registry and lifecycle events. All signals are
sent with the registry class as sender and `registry` and `module_name`
keyword arguments; failure signals also carry `error`.
"""

from django.dispatch import Signal

# Registry signals
addon_registered = Signal()         # When a package is accepted by the registry
addon_unregistered = Signal()       # When a package is removed from the registry

# Lifecycle signals
addon_initialized = Signal()        # When an addon's initialize hook succeeds
addon_initialize_failed = Signal()  # When an addon's initialize hook fails
addon_cleaned_up = Signal()         # When an addon's cleanup hook succeeds
addon_cleanup_failed = Signal()     # When an addon's cleanup hook fails
