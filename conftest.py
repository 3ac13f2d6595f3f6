"""Global pytest configuration."""

import os

# Use the in-memory document store unless a test wires a database itself
os.environ["DATABASE_URL"] = ""
