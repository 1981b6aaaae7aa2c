"""Application shell: configuration, endpoint helpers and the console client."""
