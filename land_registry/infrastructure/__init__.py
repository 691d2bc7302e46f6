"""Remote integrations: Supabase (auth, rows, storage) and Cloudinary uploads."""
