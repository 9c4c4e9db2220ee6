"""
Connection helpers turn a daemon URL into a dialer that produces a conduit to the daemon.
The ssh scheme is built in; other schemes are supplied by factories registered by scheme.
"""
