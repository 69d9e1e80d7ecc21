"""Mahoraga: terminal prompt quality analyzer."""

__version__ = "0.1.0"
