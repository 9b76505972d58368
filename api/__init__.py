"""TCG Trends HTTP API."""
