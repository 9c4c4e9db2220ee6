"""
Cancellation and deadlines for blocking operations such as dialing a connection.

A context is handed to an operation by its caller. The operation checks the context before and
after each blocking step, and gives up with the context's error when the context is done.
Contexts form a tree: a child is done as soon as its parent is done, and inherits the
parent's deadline when that is earlier than its own.
"""
import threading
import time

from connhelper.support.events import EventSource


class ContextError(Exception):
    """ The operation was abandoned because its context is done. """


class CancelledError(ContextError):
    """ The context was cancelled. """


class DeadlineExceededError(ContextError):
    """ The context deadline passed. """


class Context:
    """
    Carries a cancellation signal and an optional deadline.
    Deadlines are expressed on the context clock, time.monotonic() unless another is given.

    A child context stays registered with its parent until it is cancelled. Use it as a context
    manager, or call release(), once the operation it governs has finished.
    """

    def __init__(self, parent=None, deadline=None, clock=None):
        """
        :param clock: the clock deadlines are measured on. Defaults to the parent's clock, or time.monotonic.
        """
        self._parent = parent
        if clock is None:
            clock = parent._clock if parent is not None else time.monotonic
        self._clock = clock
        if parent is not None and parent.deadline is not None:
            deadline = parent.deadline if deadline is None else min(deadline, parent.deadline)
        self._deadline = deadline
        self._cancelled = threading.Event()
        self._lock = threading.Lock()
        self.events = EventSource()
        if parent is not None and parent.cancellable:
            parent.events.add(self._parent_cancelled)
            if parent.cancelled:
                self.cancel()

    cancellable = True

    @property
    def parent(self):
        return self._parent

    @property
    def deadline(self):
        return self._deadline

    def cancel(self):
        """
        Cancels this context and all contexts derived from it. Cancelling more than once has no effect.
        """
        with self._lock:
            if self._cancelled.is_set():
                return
            self._cancelled.set()
        self.events.fire(self)
        self.events.clear()
        if self._parent is not None:
            self._parent.events.remove(self._parent_cancelled)

    def release(self):
        """ Cancels the context, detaching it from its parent. """
        self.cancel()

    def __enter__(self):
        return self

    def __exit__(self, exc_type, exc_val, exc_tb):
        self.release()

    def _parent_cancelled(self, parent):
        self.cancel()

    @property
    def cancelled(self) -> bool:
        return self._cancelled.is_set()

    def remaining(self):
        """
        :return: the number of seconds until the deadline, or None when there is no deadline.
        """
        if self._deadline is None:
            return None
        return max(0.0, self._deadline - self._clock())

    @property
    def error(self):
        """
        :return: None while the context is live, otherwise the exception describing why it is done.
        """
        if self._cancelled.is_set():
            return CancelledError("context cancelled")
        if self._deadline is not None and self._clock() >= self._deadline:
            return DeadlineExceededError("context deadline exceeded")
        return None

    @property
    def done(self) -> bool:
        return self.error is not None

    def raise_if_done(self):
        error = self.error
        if error is not None:
            raise error

    def wait(self, timeout=None) -> bool:
        """
        Blocks until the context is done or the timeout elapses.
        :return: True if the context is done.
        """
        limit = None if timeout is None else self._clock() + timeout
        while not self.done:
            waits = [t for t in (self.remaining(), None if limit is None else limit - self._clock())
                     if t is not None]
            wait = min(waits) if waits else None
            if wait is not None and wait <= 0:
                break
            self._cancelled.wait(wait)
        return self.done


class _BackgroundContext(Context):
    """ the root context. It has no deadline and cannot be cancelled. """

    cancellable = False

    def cancel(self):
        pass

    def __repr__(self):
        return 'background()'


_background = _BackgroundContext()


def background() -> Context:
    return _background


def with_cancel(parent=None) -> Context:
    return Context(parent or _background)


def with_deadline(parent, deadline) -> Context:
    return Context(parent or _background, deadline=deadline)


def with_timeout(parent, seconds) -> Context:
    parent = parent or _background
    return Context(parent, deadline=parent._clock() + seconds)
