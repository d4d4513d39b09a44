"""Ordering context: carts, commission, orders and their settlement.

Checkout turns a buyer's cart into one or two orders (physical and digital
settle independently); the payment gate is where an order's money becomes
real earnings.
"""
