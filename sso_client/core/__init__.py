"""Core package for shared functionality of the client model layer.

- **config**: Centralized configuration management with environment support
- **exceptions**: Structured exception hierarchy with error codes
- **error_context**: Sensitive data sanitization for safe logging
- **logging**: Loguru setup for applications embedding the client
- **types**: Type aliases for JSON wire data
"""
