"""
LocalPulse Test Suite.

This package contains all tests for the LocalPulse platform:

- test_agents/: Agent behavior and integration tests
- test_graphs/: Workflow graph tests
- test_knowledge/: Neo4j and Pinecone client tests
- test_memory/: Memory system tests
- test_collectors/: Data collector tests
- test_api/: API endpoint tests
- conftest.py: Shared fixtures and test configuration

Run tests with: poetry run pytest
Run with coverage: poetry run pytest --cov=src
"""
