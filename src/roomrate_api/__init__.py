"""FastAPI surface for the roomrate booking engine."""
