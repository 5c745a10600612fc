import atexit
import logging

from django.apps import AppConfig, apps

from .exceptions import AddonError

logger = logging.getLogger(__name__)


class AddonsConfig(AppConfig):
    default_auto_field = 'django.db.models.BigAutoField'
    name = 'addon_platform.addons'
    label = 'addons'
    verbose_name = 'Addons'

    registry = None
    loader = None

    def ready(self):
        from .conf import get_addon_settings
        from .loader import AddonLoader
        from .registry import AddonRegistry

        addon_settings = get_addon_settings()
        self.registry = AddonRegistry(
            stop_on_first_failure=addon_settings['STOP_ON_FIRST_FAILURE'],
            lifecycle_timeout=addon_settings['LIFECYCLE_TIMEOUT'],
        )
        self.loader = AddonLoader.from_settings(addon_settings)

        for package in self.loader.load_all():
            try:
                self.registry.register(package)
            except AddonError as e:
                logger.error(f"Addon '{package.name}' was not registered: {e}")

        if addon_settings['AUTO_ACTIVATE']:
            result = self.registry.activate_all()
            for name, error in result.failures.items():
                logger.error(f"Addon '{name}' is unavailable: {error}")

        if addon_settings['DEACTIVATE_AT_EXIT']:
            atexit.register(self.shutdown)

    def shutdown(self):
        """Run the cleanup sweep; called at interpreter exit."""
        if self.registry is None:
            return None
        result = self.registry.deactivate_all()
        for name, error in result.failures.items():
            logger.error(f"Addon '{name}' did not clean up: {error}")
        return result


def get_registry():
    """Return the addon registry owned by the running application."""
    return apps.get_app_config('addons').registry
