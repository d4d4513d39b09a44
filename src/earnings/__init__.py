"""Earnings context: realized seller earnings and payouts against them."""
