"""Graph description writers."""
