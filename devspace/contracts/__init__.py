"""Data contracts shared by the managers, the store and the CLI."""
