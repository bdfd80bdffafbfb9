"""User interfaces for contactmerge."""
