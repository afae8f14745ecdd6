"""
Naming Application Layer

This package implements the web application layer for the naming service, handling HTTP
requests and responses using the aiohttp framework. It exposes the NamingSystem $preferred-id
operation, the CapabilityStatement and internal health endpoints.

Key Components:
- cli.py: Entry point for running the application
- server.py: Web server configuration, routes and middleware setup
- config.py: Configuration management using Pydantic settings
- resources.py: FHIR payloads and the outcome to HTTP status mapping
- handlers/: Request handlers for different endpoints
- tasks.py: Background health gauge task
- metrics.py: Metrics client abstraction
- util/: Registry maintenance utilities

The application uses two middleware layers:
- Statsd middleware for metrics collection
- Sentry middleware for error reporting

It provides the following main endpoints:
- $preferred-id (GET and POST) under /administration/NamingSystem/ and /administration/{model}/NamingSystem/
- CapabilityStatement (/metadata)
- Internal health endpoints (/internal/alive, /internal/ready)
"""
