"""Chirpy: file-backed record stores with in-memory indices."""
