"""Core models and error types shared by the engine, asset layer and CLI."""
