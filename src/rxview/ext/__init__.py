"""Outer surfaces: JSON-RPC tool adapter and HTTP app."""
