"""Shopify product CSV generator: product photos in, Shopify import CSV out."""

__version__ = "1.0.0"
