"""Core resolution and binding logic."""
