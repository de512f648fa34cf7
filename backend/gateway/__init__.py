"""Gateway core: HTTP client, error taxonomy, stream emulation and health probes."""
