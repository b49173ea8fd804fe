"""Readers that turn uploaded statement files into tables."""
