"""Composition layer: wires logging, partner configuration and the adapter."""
