"""
ReelLens - Instagram reel analytics service.

This package contains the core modules for the ReelLens system:
- collectors: Scraping provider adapters (Apify, RapidAPI, page scrape) and the fallback chain
- analysis: Claude-backed sentiment/spam/category analysis, metrics and aggregation
- services: Record reconciliation and store-backed reports
- storage: Record stores (in-memory, Supabase) and row mapping
- api: FastAPI application and endpoints
- config: Pydantic settings
- models: Domain models
- monitoring: Prometheus metrics
"""

__version__ = "0.1.0"
