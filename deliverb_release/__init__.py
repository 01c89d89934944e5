"""Release tooling: bump the project version across its metadata files."""

__version__ = "0.1.0"
