import logging
from typing import Callable

from database.live_query import Subscription
from utils.errors import NotAuthenticatedError
from utils.result import Result
from viewmodels.state import Delivered, Event, Failed, LoadState, Loading, Started, reduce

logger = logging.getLogger(__name__)


class ViewModel:
    """Owns the live subscriptions of one screen and tells observers when
    its state changes. close() on screen teardown cancels everything."""

    def __init__(self):
        self.state: LoadState = Loading()
        self.message: str | None = None
        self._observers: list[Callable[[], None]] = []
        self._subscriptions: dict[str, Subscription] = {}

    def observe(self, callback: Callable[[], None]) -> Callable[[], None]:
        """Register a change callback; returns a function that removes it."""
        self._observers.append(callback)

        def remove():
            if callback in self._observers:
                self._observers.remove(callback)
        return remove

    def _notify(self):
        for callback in list(self._observers):
            callback()

    def _dispatch(self, event: Event):
        self.state = reduce(self.state, event)
        self._notify()

    def _start_stream(self, name: str, start: Callable[..., Subscription]):
        """Cancel the stream called name, then subscribe again via start(on_snapshot, on_error)."""
        self._cancel(name)
        self._dispatch(Started())
        try:
            self._subscriptions[name] = start(self._on_snapshot, self._on_stream_error)
        except NotAuthenticatedError as e:
            self._dispatch(Failed(str(e)))

    def _on_snapshot(self, data):
        self._dispatch(Delivered(data))

    def _on_stream_error(self, message: str):
        self._dispatch(Failed(message))

    def _cancel(self, name: str):
        sub = self._subscriptions.pop(name, None)
        if sub is not None:
            sub.cancel()

    def _mutate(self, action: Callable[[], Result]) -> Result:
        """Run a write; failures become self.message instead of exceptions."""
        try:
            result = action()
        except (NotAuthenticatedError, ValueError) as e:
            result = Result.failure(e)
        self.message = None if result.ok else result.error
        if not result.ok:
            logger.info("%s: %s", type(self).__name__, result.error)
        self._notify()
        return result

    def clear_message(self):
        self.message = None
        self._notify()

    @property
    def subscription_count(self) -> int:
        return sum(1 for s in self._subscriptions.values() if s.active)

    def close(self):
        for name in list(self._subscriptions):
            self._cancel(name)
        self._observers.clear()
