"""Notifications context: buyer-facing notifications about orders.

Rows are written in the same transaction as the state change they describe;
delivery through a channel adapter happens only after that transaction
commits, and never fails the operation that triggered it.
"""
