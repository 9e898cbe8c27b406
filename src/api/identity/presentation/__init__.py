"""HTTP presentation layer for the Identity context."""

from identity.presentation.routes import router

__all__ = ["router"]
