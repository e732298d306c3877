"""HTTP API for Huddle."""
