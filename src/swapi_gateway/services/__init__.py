"""Infrastructure services (upstream clients)."""
