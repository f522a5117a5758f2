"""Bundled provider profiles (``<provider>.json``), read via ``importlib.resources``."""
