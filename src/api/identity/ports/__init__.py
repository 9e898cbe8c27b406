"""Ports (interfaces) for the Identity bounded context."""

from identity.ports.exceptions import DuplicateEmailError
from identity.ports.repositories import IUserRepository

__all__ = ["DuplicateEmailError", "IUserRepository"]
