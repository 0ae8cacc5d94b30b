"""Root conftest — shared test configuration."""

import os

# Required settings; tests never talk to a real database service
os.environ.setdefault("SUPABASE_URL", "https://project.supabase.test")
os.environ.setdefault("SUPABASE_KEY", "test-service-key")
os.environ.setdefault("PORT", "3000")
