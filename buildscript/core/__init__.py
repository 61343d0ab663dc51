"""Core — the directive compiler, lifecycle template and bootstrap."""
