"""Arbatai storefront catalog backend."""
