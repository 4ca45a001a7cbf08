"""predscan - prediction markets enriched with news and live reference prices."""

__version__ = "0.1.0"
