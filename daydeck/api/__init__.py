"""HTTP API for DayDeck."""
