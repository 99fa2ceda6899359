"""
SHIELDPOOL Test Suite
=====================

Test organization:
- tests/unit/          - Unit tests (in-memory collaborators only)

Run tests:
    pytest                          # All tests
    pytest tests/unit               # Unit tests only
    pytest --cov=shieldpool         # With coverage
"""
