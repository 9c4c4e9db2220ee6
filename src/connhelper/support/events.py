class EventSource(object):
    """
    A list of handlers that are each called when the source fires.
    """

    def __init__(self):
        self._handlers = []

    def __iadd__(self, handler):
        return self.add(handler)

    def __isub__(self, handler):
        return self.remove(handler)

    def add(self, handler):
        self._handlers.append(handler)
        return self

    def remove(self, handler):
        if handler in self._handlers:
            self._handlers.remove(handler)
        return self

    def handlers(self):
        return tuple(self._handlers)

    def clear(self):
        self._handlers = []

    def fire(self, *args, **kwargs):
        # iterate over a copy so handlers may remove themselves
        for handler in self.handlers():
            handler(*args, **kwargs)
