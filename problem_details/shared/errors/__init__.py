"""
Shared error handling package.

Intercepts unhandled errors and translates them into
RFC 7807 Problem Details responses.
"""
