"""Core configuration for the MomLink application."""
