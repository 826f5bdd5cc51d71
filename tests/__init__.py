"""
Questline Test Suite
====================

Test Organization
-----------------
- tests/unit/          : Fast unit tests with mocks (no external dependencies)
- tests/integration/   : Integration tests with testcontainers (real PostgreSQL)

Testing Philosophy
------------------
- Unit tests: Fast, isolated, test game rules
- Integration tests: Slower, test real persistence and version checks
- Use pytest markers to categorize and selectively run tests
- Follow AAA pattern: Arrange, Act, Assert
"""
