"""Entry points - HTTP surface over the core flows."""
