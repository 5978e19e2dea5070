"""Outer surfaces over the scan engine."""
