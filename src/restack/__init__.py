"""Rebase stacked GitHub pull requests onto their current base branches."""
