from abc import abstractmethod

from connhelper.support.context import background

# The host given to transports that must be handed an address. It is never resolved.
nominal_host = 'http://docker.example.com'


class HelperError(Exception):
    """ Indicates a connection helper could not be built. """


class InvalidSSHHostError(HelperError):
    """ The ssh URL does not describe a reachable host. """


class ConnectionHelper:
    """
    Connects to a remote daemon through a custom stream provider.

    The dialer is called as dialer(ctx, addr) and returns a Conduit. The address is ignored by
    the built-in dialers: each dial reaches the endpoint the helper was built for.
    Instances are immutable.
    """
    __slots__ = ('_dialer', '_host')

    def __init__(self, dialer, host=nominal_host):
        object.__setattr__(self, '_dialer', dialer)
        object.__setattr__(self, '_host', host)

    def __setattr__(self, key, value):
        raise AttributeError("ConnectionHelper is immutable")

    @property
    def dialer(self):
        return self._dialer

    @property
    def host(self):
        """ the placeholder address to give the transport. """
        return self._host

    def dial(self, ctx=None, addr=None):
        """
        Opens a new conduit to the endpoint. Each call returns an independent conduit the caller must close.
        """
        return self._dialer(ctx or background(), addr if addr is not None else self._host)

    def __repr__(self):
        return 'ConnectionHelper(host=%r)' % self._host


class ConnectionHelperFactory:
    """
    Builds a connection helper for a parsed daemon URL.
    Any callable with the same signature can be registered; this class documents the contract.
    """

    @abstractmethod
    def __call__(self, url):
        """
        :param url: the urllib.parse.ParseResult of the daemon URL
        :return: the ConnectionHelper for the URL
        Raises an exception when the URL cannot be served.
        """
        raise NotImplementedError()
