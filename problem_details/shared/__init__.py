"""
Shared module package.

Contains cross-cutting concerns used by the application:
- Error interception and Problem Details rendering
- Logging configuration
"""
