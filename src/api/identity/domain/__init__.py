"""Domain layer for the Identity bounded context."""
