"""
HTTP API

FastAPI application exposing the validation routes.
Run: uvicorn rips_validator.api.main:app
"""
