"""Game domain services: registration, quiz, mine game and reporting.

This package contains the domain logic imported by the HTTP routes,
keeping transport concerns separated from scoring and persistence rules.
"""
