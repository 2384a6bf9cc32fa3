"""Domain layer - library catalog, shuffle engine and playback session."""
