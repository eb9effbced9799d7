"""Merge a stack of dependent pull requests from trunk outward."""
