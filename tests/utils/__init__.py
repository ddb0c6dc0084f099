"""Test utilities for nativeplan."""
