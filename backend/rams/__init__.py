"""RAMS generator backend."""
