"""Land registry client: Supabase-backed land records and ownership transfers."""

__version__ = "0.1.0"
