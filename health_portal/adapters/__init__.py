"""Adapters translating outer-boundary input into domain models."""
