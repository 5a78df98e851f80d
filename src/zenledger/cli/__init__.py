"""Command line interface for zenledger."""
