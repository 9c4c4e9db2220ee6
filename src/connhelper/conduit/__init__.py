"""
The conduit package provides an abstraction of a bi-directional stream to an endpoint.
The concrete implementation runs a local process and streams its standard input and output.
"""
