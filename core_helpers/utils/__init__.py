"""
Stateless helper functions shared across services.

Includes calendar arithmetic for instants and dates, runtime introspection
helpers for arbitrary objects, and clock abstractions for "today".
"""
