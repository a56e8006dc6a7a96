"""Language server and completion engine."""
