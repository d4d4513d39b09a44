"""Shipping context: seller regional rate tables and the Shipping Allocator."""
