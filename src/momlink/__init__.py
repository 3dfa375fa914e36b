"""MomLink: matching, direct messaging and group chat for mothers and caregivers."""

__version__ = "0.1.0"
