"""Supabase Storage uploads."""
