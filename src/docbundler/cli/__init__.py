"""Command line interface for docbundler."""
