"""Earthquake relay backend."""
