"""Command-line summary report for SQCB records."""
