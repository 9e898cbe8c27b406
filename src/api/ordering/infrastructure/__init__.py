"""Infrastructure layer for the Ordering bounded context."""
