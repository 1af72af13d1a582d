"""HTTP surface for flows and tasks."""
