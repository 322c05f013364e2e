"""HTTP and WebSocket preview server for orgview."""
