"""Cross-cutting concerns: logging, errors and event dispatch."""
