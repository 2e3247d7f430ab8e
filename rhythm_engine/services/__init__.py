"""Rhythm engine services."""
