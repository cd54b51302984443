"""
ReelLens FastAPI Application.

- main: FastAPI application entry point and configuration
- routes/: API endpoint definitions
- models: Pydantic request/response models
- dependencies: FastAPI dependency injection providers

API Structure:
- /health - Health check and liveness probe
- /metrics - Prometheus metrics
- /api/analyze - Analyze a reel
- /api/compare - Compare analyzed reels
- /api/user/{username} - Creator analytics

Example:
    # Run with: uvicorn reellens.api.main:app --reload
    from reellens.api.main import app
"""
