"""Core configuration, security and error primitives for Huddle."""
