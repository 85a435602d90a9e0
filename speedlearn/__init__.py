"""Speed Learning: timed word presentation with AI recap and quiz."""
