"""Small helpers shared across ghactors modules."""
