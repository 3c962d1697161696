"""Pytest configuration and shared fixtures."""

import os

from hypothesis import settings

if "OMNIWALLET_NETWORK" not in os.environ:
    os.environ["OMNIWALLET_NETWORK"] = "local"

# Key recovery is pure Python; keep property tests short and deadline-free.
settings.register_profile("no_deadline", deadline=None, max_examples=10)
settings.load_profile("no_deadline")
