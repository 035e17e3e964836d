"""Listing services."""
