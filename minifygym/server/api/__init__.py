"""FastAPI application and request/response models."""
