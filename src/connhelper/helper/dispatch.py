"""
Resolves a daemon URL to the connection helper that can reach it.

The result has three outcomes:
- a ConnectionHelper, when the scheme is ssh or has a registered factory
- None, when nothing handles the scheme. The caller should fall back to its default transport.
- an exception, when the URL is malformed or the factory rejects it
"""
import logging
from urllib.parse import urlparse

from connhelper.helper.registry import default_registry
from connhelper.helper.sshhelper import build_ssh_helper

logger = logging.getLogger(__name__)


class InvalidDaemonURLError(ValueError):
    """ The daemon address is not a URL with a scheme. """


def get_connection_helper(daemon_url, registry=None):
    """
    Returns the connection helper for the URL, or None when no helper handles its scheme.
    :param daemon_url: the daemon address, e.g. ssh://user@host or a registered custom scheme
    :param registry: the HelperRegistry to consult. Defaults to the process-wide registry.
    """
    return _get_connection_helper(daemon_url, None, registry)


def get_connection_helper_with_ssh_opts(daemon_url, ssh_flags, registry=None):
    """
    As get_connection_helper, passing extra command line flags to ssh for ssh URLs.
    The flags are ignored for other schemes.
    """
    return _get_connection_helper(daemon_url, ssh_flags, registry)


def _get_connection_helper(daemon_url, ssh_flags, registry):
    url = urlparse(daemon_url)
    if not url.scheme:
        raise InvalidDaemonURLError("daemon URL must include a scheme: %r" % daemon_url)

    if url.scheme == 'ssh':
        return build_ssh_helper(daemon_url, ssh_flags)

    if registry is None:
        registry = default_registry
    factory = registry.lookup(url.scheme)
    if factory is None:
        logger.debug("no connection helper for scheme %r" % url.scheme)
        return None
    return factory(url)
