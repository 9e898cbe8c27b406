"""Exceptions for the Identity bounded context."""


class DuplicateEmailError(Exception):
    """Raised when registering an email address that is already taken.

    Neither the user nor its user_created event was written.
    """

    pass


class UserCreationConflictError(Exception):
    """Raised when the store rejects a new user for a reason other than its email.

    Neither the user nor its user_created event was written.
    """

    pass
