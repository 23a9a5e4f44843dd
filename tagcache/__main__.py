"""Main entry point when executing tagcache as a package.

This allows running the package using python -m tagcache.
"""

from tagcache.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
