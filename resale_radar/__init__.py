"""Resale Radar: AI-estimated cross-border resale opportunities dashboard."""

__version__ = "0.1.0"
