"""
Pipeline entry point and configuration.

Run with ``python -m layoffs_etl.pipeline.main``.
"""
