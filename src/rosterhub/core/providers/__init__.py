"""Adapters for external collaborators (payments, identity).

Each adapter turns provider SDK errors into a closed outcome enum so callers
branch on values, never on exception messages.
"""
