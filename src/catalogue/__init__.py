"""Catalogue context: sellers, products, variants and collections.

Owns the authoritative prices the checkout charges, the stock and sales
counters it adjusts, and the seller settings (commission rate, frozen flag)
that admins manage.
"""
