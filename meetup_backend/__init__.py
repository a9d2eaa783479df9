"""
Project package for the groups & events platform backend.

Settings live in `meetup_backend.settings` (base/dev/prod/test); the ASGI
entry point composes HTTP and WebSocket routing.
"""
