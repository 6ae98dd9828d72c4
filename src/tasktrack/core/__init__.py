"""Shared core: error taxonomy, ports (Protocols) and AppState."""
