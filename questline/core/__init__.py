"""
Core infrastructure layer for Questline.

Subsystems
----------
- config: static configuration from environment variables
- logging: structured logging and LogContext propagation
- database: async SQLAlchemy engine, transactions, and retry policy

This package is intentionally thin: feature modules import from the
subpackages directly.
"""
