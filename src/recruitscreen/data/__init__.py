"""Packaged configuration documents."""
