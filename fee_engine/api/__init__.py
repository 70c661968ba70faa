"""HTTP API exposing registry, configuration and preview endpoints."""
