"""Test package: point settings at throwaway values before the app is imported."""

import os

os.environ.setdefault("JWT_SECRET", "test-secret-key-that-is-long-enough-0123456789")
os.environ.setdefault("DATABASE_URL", "sqlite://")
# Cheapest bcrypt cost keeps the suite fast.
os.environ.setdefault("BCRYPT_ROUNDS", "4")
