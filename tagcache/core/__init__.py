"""Core Application Layer: the cache orchestrator.

Implements namespacing, expiration and tag bookkeeping on top of the
storage interfaces defined in the domain layer.
"""
