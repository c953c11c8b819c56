"""Entity storage layer.

This package translates application entities to and from the
Datastore format and exposes CRUD helpers over an injected client.
"""
