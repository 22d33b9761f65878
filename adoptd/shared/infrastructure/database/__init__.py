"""Supabase repository base class."""
