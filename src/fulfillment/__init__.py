"""Fulfillment context: the lifecycle of physical order lines.

Sellers (or admins) move each physical line from acceptance to delivery, or
reject or cancel it early. Every step is recorded in an append-only status
history and the buyer is notified once per step.
"""
