"""Adapters - Infrastructure implementations of core interfaces.

This package contains concrete implementations of the Protocol
interfaces defined in the core module:
- db/: In-memory repositories for users, teams, projects and tasks
- events/: Domain event publishers
- notifications/: Account mailers
"""
