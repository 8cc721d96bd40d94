"""CarbonIQ farm verification service."""
