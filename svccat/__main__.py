"""Main entry point when executing svccat as a package.

This allows running the package using python -m svccat.
"""

from svccat.main import cli_entry_point

if __name__ == "__main__":
    cli_entry_point()
