"""
Domain layer package.

Contains the Problem Details value object, the error taxonomy and the
helpers that describe a caught error. No IO, no side effects.
"""
