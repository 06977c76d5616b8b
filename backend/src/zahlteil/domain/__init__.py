"""
Domain package - Core QR-bill logic with no I/O.

This package contains the bill data model, the check digit algorithms,
text cleaning and the validation rules of the Swiss payment standard.
"""
