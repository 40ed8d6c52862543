"""Configuration for the client and its logging."""
