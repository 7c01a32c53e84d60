"""
minifeed.observability

Observability package.

Responsibilities:
- Structured logging configuration (structlog, JSON).
- Request context propagation for consistent log enrichment.
"""

# Package marker.
