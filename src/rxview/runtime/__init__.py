"""Runtime services: retry policies and structured logging."""
