"""
core_helpers – stateless date/time and object helper functions.

Subpackages:
  - utils: calendar arithmetic (dates), introspection helpers (objects),
    clock abstractions (time).
  - config: environment-driven settings.
"""
