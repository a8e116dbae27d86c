"""Adapters between gatehouse results and host web frameworks."""
