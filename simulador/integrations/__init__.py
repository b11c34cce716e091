"""External backends: Supabase storage and proposals table."""
