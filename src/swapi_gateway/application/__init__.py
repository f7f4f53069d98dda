"""Business logic: aggregation, pagination, context window and use cases."""
