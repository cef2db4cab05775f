"""Helpers used across the package. Import from the submodules directly."""
