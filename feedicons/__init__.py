"""Favicon and feed link discovery for feed readers."""
