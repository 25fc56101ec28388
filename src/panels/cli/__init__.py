"""Command line interface for the panel configurator."""
