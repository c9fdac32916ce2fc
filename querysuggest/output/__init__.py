"""Rendering helpers for suggestion results."""
