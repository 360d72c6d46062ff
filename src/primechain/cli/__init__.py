"""Command-line interface for primechain."""
