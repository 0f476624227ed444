"""Shared utilities: exceptions, logging, validation and date helpers."""
