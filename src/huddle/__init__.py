"""Huddle: social-graph and engagement-consistency backend."""

__version__ = "0.1.0"
