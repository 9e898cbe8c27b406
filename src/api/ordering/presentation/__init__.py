"""HTTP presentation layer for the Ordering context."""

from ordering.presentation.routes import router

__all__ = ["router"]
