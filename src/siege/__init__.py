"""Keep Siege — deterministic, seed-replayable tower-defense battles."""

__version__ = "0.1.0"
