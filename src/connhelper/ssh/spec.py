"""
Translates ssh:// URLs into the arguments of an ssh command line.
"""
from urllib.parse import urlparse, ParseResult

from connhelper.support.mixins import CommonEqualityMixin, StringerMixin


class InvalidSSHURLError(ValueError):
    """ The URL does not describe an ssh host. """


class SSHSpec(CommonEqualityMixin, StringerMixin):
    """
    The parts of an ssh URL that identify the remote login.
    """

    def __init__(self, host, user=None, port=None, path=None):
        self.host = host
        self.user = user
        self.port = port
        self.path = path

    def args(self, *remote_command):
        """
        Builds the ssh arguments that log in to the host and run the given remote command.

        >>> SSHSpec('build.internal', 'alice', '2222').args('uptime')
        ['-l', 'alice', '-p', '2222', '--', 'build.internal', 'uptime']
        >>> SSHSpec('build.internal').args()
        ['--', 'build.internal']
        """
        args = []
        if self.user:
            args += ['-l', self.user]
        if self.port:
            args += ['-p', self.port]
        args += ['--', self.host]
        args += remote_command
        return args


def spec_from_url(url: ParseResult) -> SSHSpec:
    """
    Validates a parsed ssh URL and extracts the login details.
    :raises InvalidSSHURLError: when the URL cannot be used to reach a host
    """
    return _spec(url, url.geturl())


def parse_url(daemon_url) -> SSHSpec:
    """
    Parses the ssh URL text, e.g. ssh://user@host:2222
    :raises InvalidSSHURLError: when the text is not a usable ssh URL
    """
    try:
        url = urlparse(daemon_url)
    except ValueError as e:
        raise InvalidSSHURLError("invalid SSH URL %r: %s" % (daemon_url, e)) from e
    return _spec(url, daemon_url)


def _spec(url, text):
    try:
        return _new_spec(url)
    except ValueError as e:
        raise InvalidSSHURLError("invalid SSH URL %r: %s" % (text, e)) from e


def _new_spec(url: ParseResult) -> SSHSpec:
    if not url.scheme:
        raise ValueError("no scheme provided")
    if url.scheme != 'ssh':
        raise ValueError("incorrect scheme: %s" % url.scheme)
    if url.password is not None:
        raise ValueError("plain-text password is not supported")
    if not url.hostname:
        raise ValueError("hostname is empty")
    # raises ValueError for a port that is not a number in range
    port = url.port
    if url.query:
        raise ValueError("query parameters are not allowed: %r" % url.query)
    if url.fragment:
        raise ValueError("fragments are not allowed: %r" % url.fragment)
    return SSHSpec(_host(url), url.username or None, str(port) if port is not None else None, url.path or None)


def _host(url: ParseResult):
    # urlparse lower-cases the hostname; keep it as written
    host = url.netloc.rpartition('@')[2]
    if host.startswith('['):
        return host[1:host.index(']')]
    return host.rpartition(':')[0] if ':' in host else host
