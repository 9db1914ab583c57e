"""Integration tests for the bytebardctl CLI.

These tests drive complete commands through Typer's CliRunner with the
network replaced by a recording transport.
"""
