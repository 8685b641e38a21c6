"""Application – event sourcing, command handlers, projections, queries, tracking."""
