"""SQLAlchemy-backed adapters and transport adapters for contactmerge."""
