"""App-Ray CI scanner."""
