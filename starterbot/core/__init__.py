"""Routing core — registry, matchers, acknowledgment contract, dispatch."""
