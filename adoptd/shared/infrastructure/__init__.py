"""
Infrastructure layer package.
Provides the Supabase repository base, storage uploads and the HTTP API client.
"""
