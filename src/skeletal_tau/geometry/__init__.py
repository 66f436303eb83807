"""Circumcenter kernel and Euler-line extraction."""
