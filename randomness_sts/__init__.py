"""Statistical tests for the randomness of bit sequences, with a test runner and a benchmark command."""

__version__ = "0.1.0"