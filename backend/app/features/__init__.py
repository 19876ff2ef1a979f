"""
Feature modules for the race ratio predictor.

Each feature is a self-contained module with:
- models.py - Dataclasses (no DB dependency)
- schemas.py - Pydantic schemas
- service.py - Business logic
- parser.py / loader.py - Data ingestion (optional)
"""
