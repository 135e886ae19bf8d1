"""Core Layer: pure domain logic, no IO, no async.

Invariants:
    - No module in core/ imports from services/, api/ or infrastructure/
    - Functions here never touch the filesystem or the network
"""
