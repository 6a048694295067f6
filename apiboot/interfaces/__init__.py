"""
Handler-facing helpers and routers.

Everything a route handler needs from the bootstrap layer: the request
context, parameter parsing and binding/validation accessors.
"""
