"""Feng Shui Reference Catalog: Stars, Gates, Spirits and Formations.

Invariants:
    - Package root contains no executable code (import side-effects prohibited)
"""
