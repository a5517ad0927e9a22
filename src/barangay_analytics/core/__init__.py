"""Configuration, wiring and the dashboard facade."""
