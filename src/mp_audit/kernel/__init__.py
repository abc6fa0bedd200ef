"""Kernel – errors, clock and security primitives shared by every layer."""
