"""Session-scoped services used by the UI layer."""
