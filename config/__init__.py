"""Top-level package for Django configuration.

Holds the settings modules for each environment and the WSGI and ASGI
entry points of the equipment rental project.
"""
