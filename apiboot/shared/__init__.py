"""
Shared module package.

Contains the cross-cutting concerns the bootstrap layer installs:
- Error classification and response shaping
- Baseline middleware chain
- Locale-aware validation messages
- Request binding and validation
- Logging configuration
"""
