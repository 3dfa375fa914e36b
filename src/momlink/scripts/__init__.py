"""Operational scripts for MomLink."""
