"""
Lifecycle sweep results and hook invocation.
"""

from concurrent.futures import ThreadPoolExecutor, TimeoutError as FutureTimeoutError
from dataclasses import dataclass, field
from typing import Callable, Dict, List, Optional

from .exceptions import AggregateLifecycleError, ModuleLifecycleError


INITIALIZE = 'initialize'
CLEANUP = 'cleanup'


class HookTimeout(TimeoutError):
    """Raised when a lifecycle hook does not return within the configured timeout"""
    pass


@dataclass
class LifecycleResult:
    """
    Outcome of one lifecycle sweep (initialize or cleanup).

    A sweep never raises on a module failure; failures are collected here
    and the host decides whether to log them or call raise_for_failures().
    """

    phase: str
    invoked: List[str] = field(default_factory=list)
    failures: Dict[str, ModuleLifecycleError] = field(default_factory=dict)
    skipped: List[str] = field(default_factory=list)

    @property
    def ok(self) -> bool:
        return not self.failures

    @property
    def succeeded(self) -> List[str]:
        return [name for name in self.invoked if name not in self.failures]

    def raise_for_failures(self) -> None:
        if self.failures:
            raise AggregateLifecycleError(self.phase, self.failures)


def call_hook(hook: Callable[[], None], timeout: Optional[float] = None) -> None:
    """
    Call a zero-argument lifecycle hook.

    With a timeout the hook runs in a worker thread. A hook that overruns
    is reported as HookTimeout; its thread is left to finish on its own
    since Python threads cannot be cancelled.
    """
    if timeout is None:
        hook()
        return

    executor = ThreadPoolExecutor(max_workers=1, thread_name_prefix='addon-hook')
    try:
        future = executor.submit(hook)
        try:
            future.result(timeout=timeout)
        except FutureTimeoutError:
            if future.done():
                raise
            raise HookTimeout(f"hook did not complete within {timeout}s") from None
    finally:
        executor.shutdown(wait=False)
