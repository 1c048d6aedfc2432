"""Infrastructure: stubs, system adapters and observability."""
