"""Core upload engine."""
