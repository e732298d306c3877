"""Operational scripts for Huddle."""
