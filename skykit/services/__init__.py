"""Service layer shared by the API routes."""
