"""Core building blocks shared by all event-stream features."""
