"""Upstream listing ingestion."""
