"""
Configuration loading and validation.

Strongly-typed settings objects read from environment variables (and .env).
"""
