"""Content-provider adapters (one module per site)."""
