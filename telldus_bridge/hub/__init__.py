"""Hub API clients."""
