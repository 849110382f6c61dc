"""Supabase bucket storage adapter for a generic async storage interface."""

__version__ = "0.1.0"
