"""Database schema for Questline."""
