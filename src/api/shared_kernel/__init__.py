"""Shared Kernel.

Ports and value objects used by both the ordering and identity contexts:
the transactional outbox contract and the message broker contract.
"""
