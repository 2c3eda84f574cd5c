"""Command-line interface and polling loop."""
