"""Supabase repository implementations."""
