"""CLI command implementations for bu."""
