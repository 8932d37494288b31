"""Ports for site health."""
