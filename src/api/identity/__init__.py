"""Identity bounded context.

User registration. Registering writes a ``user_created`` event through
the transactional outbox; this context also consumes that event.
"""
