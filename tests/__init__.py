"""Layoffs ETL Test Suite.

This package contains unit and integration tests for the Layoffs ETL project.

Test Structure:
- unit/: Unit tests for individual functions and classes
- integration/: Integration tests against PostgreSQL
"""
