"""Reusable patterns for building data-access verticals.

Each module demonstrates a self-contained pattern that can be adapted
to any domain: optional-filter repositories, state lifecycles, and
service configuration.
"""
