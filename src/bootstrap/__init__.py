"""Composition root for the Chit Chest services.

API routes reach the store, the lock and the services through this package
so that they depend on ports, never on concrete adapters.
"""
