"""Serverless entrypoint.

Python serverless runtimes look for an ASGI ``app`` in ``api/``; this re-exports
the same application the long-running server uses.
"""

from shopify_generator.server.main import app

__all__ = ["app"]
