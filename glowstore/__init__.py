"""Glow persistence service."""
