"""Core utilities: exceptions, money and time helpers."""
