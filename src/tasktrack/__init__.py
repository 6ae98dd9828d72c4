"""
tasktrack: console client for a personal task tracker.

Subpackages:
- auth: session state, credential persistence, request authorization, route guard
- api: httpx transport and typed clients for the auth/task/AI backends
- tasks: task models, filtering, composition (manual + AI-assisted), analytics
- cli / connectors: composition root, slash commands, console loop
"""

__version__ = "0.1.0"
