"""Global pytest configuration."""

import os

# Point the store at an unroutable test host before any imports
os.environ.setdefault("STORE_BASE_URL", "http://store.test")
