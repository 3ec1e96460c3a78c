"""Couche infrastructure : adaptateurs de persistance."""
