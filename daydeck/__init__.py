"""DayDeck: day planning with a self-consistent time-block timeline."""

__version__ = "0.1.0"
