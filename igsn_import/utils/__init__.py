"""Parsing utilities for IGSN sample metadata."""
