"""Configuration, logging, persistence and security helpers."""
