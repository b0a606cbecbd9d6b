"""Commons package - shared settings, telemetry, storage and security."""
