"""Encoders for telemetry wire formats."""
