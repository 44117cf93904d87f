"""Top-level package for Django configuration.

Contains settings modules for the different environments and the entry
points for WSGI and ASGI.
"""
