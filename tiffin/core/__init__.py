"""Core infrastructure: config, pricing, errors, logging."""
