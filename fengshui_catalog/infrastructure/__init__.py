"""Infrastructure: filesystem storage and logging setup."""
