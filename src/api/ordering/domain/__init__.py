"""Domain layer for the Ordering bounded context."""
