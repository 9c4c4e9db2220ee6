"""


Daemon Connections

- Daemon URL: the address of a remote daemon. The URL scheme selects the transport.
- Connection helper: a dialer plus a nominal host. The dialer produces a conduit to the daemon
  each time it is called. The nominal host is a placeholder handed to transports that insist on
  an address; it is never resolved.
- Conduit: abstraction of a bi-directional channel. Combines 2 streams for reading and writing.
  CommandConduit runs a local process and uses its stdin/stdout as the channel.
- Dispatch - get_connection_helper(url) returns
    - the ssh helper for ssh:// URLs. Each dial runs `ssh <flags> <login> docker system dial-stdio`.
    - the helper built by the factory registered for the scheme
    - None when nothing handles the scheme, so the caller can fall back to a plain socket.
- Registry - scheme -> factory(parsed url). Register during start up, before dispatching.
  There is no locking. HelperRegistry.snapshot() gives a frozen copy.


## Threading

Dispatch and the factories are synchronous and do no I/O. Dialing starts a process, which is the
only blocking step. Dialing takes a Context; when the context is cancelled or its deadline passes
before the process is running, the process is killed and the context error raised. Once a conduit
is returned the context no longer affects it.

Each conduit runs a daemon thread that drains the process stderr, so a chatty process never blocks.
The conduit belongs to whoever dialed it and must be closed by them.

"""
