"""Market enrichment: news and reference prices."""
