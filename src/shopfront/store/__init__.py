"""Storefront and admin dashboard over two catalog/order backends.

Reads are merged from a read-only seed backend and an editable live
backend; writes go to the live backend, guarded by the id-range rule.
"""
