"""HTTP API for the MomLink application."""
