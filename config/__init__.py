"""Top-level package for Django configuration.

Settings modules for the travel-agency sales store (development,
production and test) and the WSGI/ASGI entry points.
"""
