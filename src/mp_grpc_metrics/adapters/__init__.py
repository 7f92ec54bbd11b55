"""Metrics backend adapters – Prometheus and OpenTelemetry."""
