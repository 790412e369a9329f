"""Keep Siege HTTP server."""
