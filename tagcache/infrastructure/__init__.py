"""Infrastructure Layer: Contains concrete implementations and adapters.

Connects the cache to the outside world (disk, memory, console, config
files) by implementing the interfaces defined in the domain layer.
"""
