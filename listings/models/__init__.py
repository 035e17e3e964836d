"""Enumerations shared by schemas."""
