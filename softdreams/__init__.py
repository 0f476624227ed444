"""Soft Dreams - personalized bedtime stories for little ones."""

__version__ = "0.1.0"
