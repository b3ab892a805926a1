"""
QuillPress Server Package.

This package contains the web server implementation for the QuillPress CMS.
It includes the API definition, service logic, middleware, and configuration.

Subpackages:
    api: FastAPI route definitions and endpoint logic.
    core: Core configurations and constants.
    services: Business logic combining repositories and content processing.
    exception_handlers: Mapping of domain and unexpected errors to responses.
    middleware: Request tracing and timing.
"""
