"""Domain Interfaces (Ports):

Defines the contracts (Abstract Base Classes) that storage backends
must implement. The cache orchestrator depends on these interfaces, not
concrete implementations.
"""
