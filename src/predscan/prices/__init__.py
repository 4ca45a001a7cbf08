"""Live reference prices: sources, cache, correlation."""
