"""Request IDs, structlog wiring, and an in-memory metrics snapshot for the portal API."""
