# ==========================
# Resource Fetch State Machine
# ==========================
import asyncio
import logging
from typing import Awaitable, Callable, Generic, List, Optional, Set, TypeVar
from config.settings import settings
from models.fetch_state_model import FetchState
from services.fetch_errors import FetchError, FetchTimeout, ParseFailure
from services.request_coordinator import RequestCoordinator

logger = logging.getLogger(__name__)

K = TypeVar('K')
T = TypeVar('T')

StateListener = Callable[[FetchState], None]

_USE_DEFAULT_TIMEOUT = object()


class ResourceFetchStateMachine(Generic[K, T]):
    """
    Owns the retrieval lifecycle of one logical resource

    idle -> loading -> success | error, back to loading on a new key and to
    idle when the key is cleared. set_key() transitions synchronously and
    schedules the fetch on the running event loop. Results of superseded
    requests are dropped without touching state; in-flight requests are
    never cancelled, only their effect is suppressed.

    Single owner: one consumer drives set_key(); no locking.
    """

    def __init__(
        self,
        name: str,
        fetcher: Callable[[K], Awaitable[T]],
        timeout=_USE_DEFAULT_TIMEOUT
    ):
        self.name = name
        self._fetcher = fetcher
        self.timeout: Optional[float] = (
            settings.request_timeout if timeout is _USE_DEFAULT_TIMEOUT else timeout
        )
        self._coordinator = RequestCoordinator()
        self._state: FetchState = FetchState.idle()
        self._key: Optional[K] = None
        self._tasks: Set[asyncio.Task] = set()
        self._listeners: List[StateListener] = []
        self.last_error: Optional[FetchError] = None

    @property
    def state(self) -> FetchState:
        return self._state

    @property
    def key(self) -> Optional[K]:
        return self._key

    @property
    def pending(self) -> int:
        """Number of physical requests still outstanding (stale ones included)"""
        return len(self._tasks)

    def add_listener(self, callback: StateListener):
        """Register a callback invoked with every committed state"""
        self._listeners.append(callback)

    def remove_listener(self, callback: StateListener):
        self._listeners = [cb for cb in self._listeners if cb != callback]

    def set_key(self, key: Optional[K]) -> Optional[asyncio.Task]:
        """
        Point the machine at a new key

        Args:
            key: Resource key, or None to go idle

        Returns:
            The scheduled fetch task, or None when the key was cleared
        """
        if key is None:
            self._key = None
            self._coordinator.invalidate()
            self.last_error = None
            self._commit(FetchState.idle())
            return None

        loop = asyncio.get_running_loop()
        self._key = key
        token = self._coordinator.begin_request()
        self.last_error = None
        self._commit(FetchState.loading())

        logger.debug(f"[FETCH] {self.name}: request #{token} for {key!r}")
        task = loop.create_task(self._run(key, token), name=f"fetch-{self.name}-{token}")
        self._tasks.add(task)
        task.add_done_callback(self._tasks.discard)
        return task

    def refresh(self) -> Optional[asyncio.Task]:
        """Re-issue the request for the current key"""
        return self.set_key(self._key)

    async def wait(self):
        """Wait until every outstanding request (stale or not) has resolved"""
        while self._tasks:
            await asyncio.gather(*list(self._tasks), return_exceptions=True)

    async def _run(self, key: K, token: int):
        try:
            if self.timeout:
                value = await asyncio.wait_for(self._fetcher(key), self.timeout)
            else:
                value = await self._fetcher(key)
            if value is None:
                raise ParseFailure("empty response")
        except asyncio.TimeoutError:
            self._fail(key, token, FetchTimeout(self.timeout))
            return
        except FetchError as e:
            self._fail(key, token, e)
            return
        except Exception as e:
            if not self._coordinator.is_stale(token):
                logger.exception(f"[FETCH] {self.name}: unexpected failure for {key!r}")
            self._fail(key, token, FetchError(f"Failed to load {self.name.replace('_', ' ')}: {type(e).__name__}"))
            return

        if self._coordinator.is_stale(token):
            logger.debug(f"[FETCH] {self.name}: dropping stale response #{token} for {key!r}")
            return

        self._commit(FetchState.success(value))
        logger.debug(f"[FETCH] {self.name}: committed response #{token} for {key!r}")

    def _fail(self, key: K, token: int, error: FetchError):
        if self._coordinator.is_stale(token):
            logger.debug(f"[FETCH] {self.name}: dropping stale failure #{token} for {key!r}: {error.message}")
            return

        logger.warning(f"[FETCH] {self.name}: request for {key!r} failed: {error.message}")
        self.last_error = error
        self._commit(FetchState.error(error.message))

    def _commit(self, state: FetchState):
        self._state = state
        for callback in list(self._listeners):
            try:
                callback(state)
            except Exception as e:
                logger.error(f"[FETCH] {self.name}: state listener failed: {e}")
