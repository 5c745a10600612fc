"""
Addon settings.

All addon configuration lives in the ADDONS Django setting:

    ADDONS = {
        'PACKAGES': ['business_addons.crm', 'business_addons.hr'],
        'PATHS': [BASE_DIR / 'addons'],
        'AUTO_ACTIVATE': True,
        'STOP_ON_FIRST_FAILURE': False,
        'LIFECYCLE_TIMEOUT': 10,
    }
"""

from typing import Any, Dict

from django.conf import settings
from django.core.exceptions import ImproperlyConfigured


DEFAULTS: Dict[str, Any] = {
    # Dotted paths of addon packages, loaded in this order
    'PACKAGES': [],
    # Directories scanned for addon sub-directories holding a manifest
    'PATHS': [],
    # Entry point group of installed distributions exporting addons
    'ENTRY_POINT_GROUP': 'addon_platform.addons',
    'AUTO_ACTIVATE': True,
    'STOP_ON_FIRST_FAILURE': False,
    # Seconds allowed per initialize/cleanup call, None for no limit
    'LIFECYCLE_TIMEOUT': None,
    'DEACTIVATE_AT_EXIT': True,
}


def get_addon_settings() -> Dict[str, Any]:
    """Return the ADDONS setting merged over the defaults."""
    user_settings = getattr(settings, 'ADDONS', None) or {}
    if not isinstance(user_settings, dict):
        raise ImproperlyConfigured("The ADDONS setting must be a dictionary")

    unknown = set(user_settings) - set(DEFAULTS)
    if unknown:
        raise ImproperlyConfigured(
            f"Unknown ADDONS setting(s): {', '.join(sorted(unknown))}"
        )

    merged = dict(DEFAULTS)
    merged.update(user_settings)

    timeout = merged['LIFECYCLE_TIMEOUT']
    if timeout is not None and (not isinstance(timeout, (int, float)) or timeout <= 0):
        raise ImproperlyConfigured("ADDONS['LIFECYCLE_TIMEOUT'] must be a positive number or None")
    return merged
