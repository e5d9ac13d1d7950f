"""HTTP API for AI Pulse."""
