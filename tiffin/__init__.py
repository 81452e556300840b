"""Client-side cart and order core for the Tiffin meal ordering app."""

__version__ = "1.0.0"
