"""
Configuration loading and validation.

Provides a strongly typed settings object read from environment variables
(and .env) with upfront validation.
"""
