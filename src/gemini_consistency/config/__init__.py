"""Configuration: layered settings and template loading."""
