"""Core utilities and shared infrastructure.

- config: Configuration loading and validation
- constants: Provider defaults and response message strings
- exceptions: Error taxonomy tagged with ``ErrorKind``
- ingress: Azure Functions HTTP request/response translation
"""
