"""
Pytest configuration and shared fixtures

This file contains test fixtures that can be used across all tests.
Fixtures are reusable components that set up test preconditions.

Learn more: https://docs.pytest.org/en/stable/fixture.html
"""

import os

import pytest


@pytest.fixture(scope="session")
def test_database_url():
    """
    Provide the database URL for integration tests.

    Integration tests drop and recreate tables, so they only run against a
    database named explicitly in TEST_DATABASE_URL.

    Scope: session (created once per test run)

    Returns:
        str | None: PostgreSQL connection URL
    """
    return os.getenv("TEST_DATABASE_URL")


@pytest.fixture(scope="function")
def raw_layoff_record() -> dict:
    """
    Provide a single raw layoff record as it comes out of the source table.

    Scope: function (created fresh for each test)

    Returns:
        dict: Raw layoff record
    """
    return {
        "company": "CompA",
        "location": "NY",
        "industry": "Crypto-X",
        "total_laid_off": 100,
        "percentage_laid_off": "10",
        "date": "01/05/2023",
        "stage": "Series B",
        "country": "United States",
        "funds_raised_millions": 50,
    }


@pytest.fixture(scope="function")
def raw_layoff_batch() -> list[dict]:
    """
    Provide a batch of raw layoff records with the usual data problems.

    Contains an exact duplicate, untrimmed company names, crypto variants,
    malformed locations, a country with a trailing period, a blank industry
    that can be backfilled and a record without any layoff figure.

    Scope: function (created fresh for each test)

    Returns:
        list[dict]: Raw layoff records
    """
    return [
        {
            "company": "Airbnb", "location": "SF Bay Area", "industry": "Travel",
            "total_laid_off": 1900, "percentage_laid_off": "0.25", "date": "05/05/2020",
            "stage": "Private Equity", "country": "United States", "funds_raised_millions": 5400,
        },
        {
            "company": "Airbnb", "location": "SF Bay Area", "industry": "",
            "total_laid_off": 30, "percentage_laid_off": None, "date": "3/3/2023",
            "stage": "Post-IPO", "country": "United States", "funds_raised_millions": 6400,
        },
        {
            "company": " Included Health", "location": "SF Bay Area", "industry": "Healthcare",
            "total_laid_off": None, "percentage_laid_off": "0.06", "date": "7/25/2022",
            "stage": "Series E", "country": "United States", "funds_raised_millions": 272,
        },
        {
            "company": "Coinbase", "location": "SF Bay Area", "industry": "CryptoCurrency",
            "total_laid_off": 1100, "percentage_laid_off": "0.18", "date": "6/14/2022",
            "stage": "Post-IPO", "country": "United States", "funds_raised_millions": 549,
        },
        {
            "company": "Coinbase", "location": "SF Bay Area", "industry": "CryptoCurrency",
            "total_laid_off": 1100, "percentage_laid_off": "0.18", "date": "6/14/2022",
            "stage": "Post-IPO", "country": "United States", "funds_raised_millions": 549,
        },
        {
            "company": "Bitpanda", "location": "Vienna", "industry": "Crypto Currency",
            "total_laid_off": None, "percentage_laid_off": None, "date": "9/20/2022",
            "stage": "Series C", "country": "Austria", "funds_raised_millions": 546,
        },
        {
            "company": "Kry", "location": "Malmö", "industry": "Healthcare",
            "total_laid_off": 300, "percentage_laid_off": "0.1", "date": "10/10/2022",
            "stage": "Series D", "country": "Sweden", "funds_raised_millions": 568,
        },
        {
            "company": "Gorillas", "location": "Düsseldorf", "industry": "Food",
            "total_laid_off": 300, "percentage_laid_off": "0.5", "date": "12/6/2022",
            "stage": "Series C", "country": "Germany", "funds_raised_millions": 1300,
        },
        {
            "company": "Olist", "location": "FlorianÃ³polis", "industry": "Retail",
            "total_laid_off": None, "percentage_laid_off": "0", "date": "2/27/2023",
            "stage": "Series E", "country": "Brazil", "funds_raised_millions": 322,
        },
        {
            "company": "Tesla", "location": "Austin", "industry": "Transportation",
            "total_laid_off": 200, "percentage_laid_off": None, "date": "12/15/2022",
            "stage": "Post-IPO", "country": "United States.", "funds_raised_millions": 20200,
        },
    ]


# Mark tests based on their type for selective running
def pytest_configure(config):
    """
    Register custom pytest markers.

    This allows us to run specific test categories:
    - pytest -m unit        (run only unit tests)
    - pytest -m integration (run only integration tests)
    """
    config.addinivalue_line(
        "markers", "unit: mark test as a unit test (isolated, fast)"
    )
    config.addinivalue_line(
        "markers", "integration: mark test as an integration test (requires services)"
    )
