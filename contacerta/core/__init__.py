"""Core utilities: configuration, logging, errors, access control."""
