"""Domain entities and ports."""
