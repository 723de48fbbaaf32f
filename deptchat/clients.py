from supabase import create_client, Client


def create_service_client(settings) -> Client:
    """Supabase client for backend table access (FAQs, chat sessions, messages). Falls back to the anon key."""
    key = settings.supabase_service_key or settings.supabase_anon_key
    return create_client(settings.supabase_url, key)


def create_anon_client(settings) -> Client:
    """Supabase client for Supabase Auth calls (sign in/up/out, current user). One per request."""
    return create_client(settings.supabase_url, settings.supabase_anon_key)
