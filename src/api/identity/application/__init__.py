"""Application layer for the Identity bounded context."""
