"""Application layer: configuration, services, and the command-line entry point."""
