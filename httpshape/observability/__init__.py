"""Request/response instrumentation.

Pure-ASGI middleware that snapshots each request, mirrors the response it
produces, and reports a sample of both to a pluggable sink, plus structlog
setup for JSON output.
"""
