"""Application layer for the Ordering bounded context."""
