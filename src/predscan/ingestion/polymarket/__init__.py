"""Polymarket Gamma client."""
