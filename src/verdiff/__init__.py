"""verdiff: version identifiers and change-impact reports for project snapshots."""

__version__ = "0.1.0"
