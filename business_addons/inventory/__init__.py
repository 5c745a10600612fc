from pathlib import Path

from addon_platform.addons.base import ModulePackage

from .services import cleanup, initialize

package = ModulePackage.from_manifest(
    Path(__file__).parent / 'manifest.yaml',
    initialize=initialize,
    cleanup=cleanup,
)
