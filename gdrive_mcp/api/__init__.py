"""HTTP surface: SSE stream, message posting, health and metrics."""
