"""Ordering bounded context.

Checkout, inventory reservation and the order fulfilment saga.
"""
