"""Domain layer: contact model, ports, and the merge decision logic."""
