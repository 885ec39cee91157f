"""HTTP surface for the registry."""
