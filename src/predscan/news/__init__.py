"""News search: query normalization, feed parsing, feed client."""
