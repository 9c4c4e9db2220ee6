"""
A configuration helper built on top of ConfigObj. Configuration files are layered - default,
os-specific, per-user and local - with a schema to validate and convert the types of the values.

Used to set module-level tunables, such as the process conduit timeouts.
"""
