"""Fetchers for upstream market data providers."""
