"""
Observability for safety-core.

Logging setup (loguru), Prometheus metrics and the HTTP surface
that exposes health, metrics and the read-side query endpoints.
"""
