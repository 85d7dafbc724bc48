"""CardSense statement service: bank statement extraction, categorization and spending history."""

__version__ = "1.0.0"
