"""
Pydantic schema definitions for API payloads.

Each domain (users, reviews, votes, notifications) defines its own
models for request and response bodies.
"""
