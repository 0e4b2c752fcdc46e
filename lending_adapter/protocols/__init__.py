"""Market-family adapters."""
