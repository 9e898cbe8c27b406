"""Infrastructure layer for the Identity bounded context."""
