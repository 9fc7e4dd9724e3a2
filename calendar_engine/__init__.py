"""Calendar scheduling optimization engine and its HTTP API."""
