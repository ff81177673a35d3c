"""Feature modules for event-stream."""
