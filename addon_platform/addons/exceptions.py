"""
Addon System Exceptions

Custom exceptions for the addon registry and its lifecycle.
"""


class AddonError(Exception):
    """Base exception for addon system errors"""
    pass


class InvalidModuleDescriptor(AddonError):
    """Raised when a module descriptor or package is malformed"""
    pass


class RegistryError(AddonError):
    """Base exception for registration conflicts"""
    pass


class DuplicateModuleName(RegistryError):
    """Raised when a module with the same name is already registered"""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f"Module '{module_name}' is already registered")


class DuplicateComponentKey(RegistryError):
    """Raised when a package contributes a component name already in use"""

    def __init__(self, module_name: str, owners: dict):
        self.module_name = module_name
        # component name -> module currently providing it
        self.owners = dict(owners)
        keys = ', '.join(
            f"'{key}' (provided by '{owner}')" for key, owner in self.owners.items()
        )
        super().__init__(
            f"Module '{module_name}' declares component names already registered: {keys}"
        )

    @property
    def keys(self):
        return list(self.owners)


class RegistryShuttingDown(RegistryError):
    """Raised when the registry is mutated after deactivation began"""
    pass


class ModuleNotRegistered(RegistryError):
    """Raised when a module name is unknown to the registry"""

    def __init__(self, module_name: str):
        self.module_name = module_name
        super().__init__(f"Module '{module_name}' is not registered")


class RegistryStateError(RegistryError):
    """Raised when the registry is in an invalid state for the requested operation"""
    pass


class ModuleLifecycleError(AddonError):
    """Base exception for a failed initialize/cleanup hook of one module"""

    phase = 'lifecycle'

    def __init__(self, module_name: str, error: BaseException):
        self.module_name = module_name
        self.error = error
        self.__cause__ = error
        super().__init__(f"Module '{module_name}' failed to {self.phase}: {error!r}")


class ModuleInitError(ModuleLifecycleError):
    """Raised when a module's initialize hook fails"""

    phase = 'initialize'


class ModuleCleanupError(ModuleLifecycleError):
    """Raised when a module's cleanup hook fails"""

    phase = 'cleanup'


class AggregateLifecycleError(AddonError):
    """
    Collection of per-module lifecycle failures from one sweep.

    `failures` maps module names to their ModuleInitError or
    ModuleCleanupError, in the order the hooks were invoked.
    """

    def __init__(self, phase: str, failures: dict):
        self.phase = phase
        self.failures = dict(failures)
        details = '; '.join(f"{name}: {err.error!r}" for name, err in self.failures.items())
        super().__init__(
            f"{len(self.failures)} module(s) failed to {phase}: {details}"
        )
