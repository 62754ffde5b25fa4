"""Domain types, zone classifier, session context and frame loop."""
