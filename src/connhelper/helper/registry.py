"""
The table of connection helper factories, keyed by URL scheme.

Registration is expected to happen while the process initializes, before any daemon URL is
resolved. The registry does no locking: registering concurrently with lookups is not supported.
A frozen snapshot can be taken once registration is complete and handed to the dispatcher.
"""
import logging
from types import MappingProxyType

from connhelper.helper.base import HelperError

logger = logging.getLogger(__name__)


class RegistryFrozenError(HelperError):
    """ The registry is a snapshot and cannot be changed. """


class HelperRegistry:
    """
    Maps a URL scheme to a factory that builds a ConnectionHelper from the parsed URL.
    """

    def __init__(self, factories=None, frozen=False):
        factories = dict(factories or {})
        self._factories = MappingProxyType(factories) if frozen else factories

    @property
    def frozen(self) -> bool:
        return isinstance(self._factories, MappingProxyType)

    def register(self, scheme, factory):
        """
        Registers the factory for the scheme, replacing any factory already registered for it.
        The scheme is compared exactly as written.
        """
        if self.frozen:
            raise RegistryFrozenError("cannot register %r: the registry is frozen" % scheme)
        if scheme in self._factories:
            logger.debug("replacing connection helper factory for scheme %r" % scheme)
        self._factories[scheme] = factory

    def lookup(self, scheme):
        """
        :return: the factory registered for the scheme, or None
        """
        return self._factories.get(scheme)

    def snapshot(self):
        """
        :return: a frozen copy of this registry
        """
        return HelperRegistry(self._factories, frozen=True)

    def schemes(self):
        return sorted(self._factories)

    def __contains__(self, scheme):
        return scheme in self._factories

    def __len__(self):
        return len(self._factories)


default_registry = HelperRegistry()


def register(scheme, factory):
    """
    Registers a connection helper factory with the default registry.
    """
    default_registry.register(scheme, factory)


def lookup(scheme):
    return default_registry.lookup(scheme)
