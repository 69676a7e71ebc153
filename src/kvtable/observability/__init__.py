"""
kvtable.observability

Observability package.

Responsibilities:
- Structured logging configuration.
- Request context propagation for HTTP log lines.
"""

# Package marker.
