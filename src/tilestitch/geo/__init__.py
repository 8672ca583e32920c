"""Geographic helpers - slippy-map tile arithmetic."""
