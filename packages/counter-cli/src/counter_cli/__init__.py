"""Command-line host for a counter device."""
