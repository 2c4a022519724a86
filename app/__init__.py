"""Event Registration & Check-in API Application."""
