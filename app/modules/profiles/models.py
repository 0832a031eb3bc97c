# Supabase table: user_profiles
# This file documents the expected database schema
# Actual operations are handled via Supabase SDK in repository.py
# Identity comes from the external auth provider; the row id is derived from it

"""
Expected Supabase table structure:

user_profiles:
- id: bigint (primary key, digits of the auth provider's user id, at most 10)
- firstname: text (default '')
- lastname: text (default '')
- bio: text (default '')
- pfp_url: text (default '') - falls back to the provider's image when empty
- skills: text (default '') - comma-delimited, stored as raw text
- availability: boolean (default false)
- total_jobs_completed: integer (default 0, >= 0) - maintained by job workflows
- ratings: double precision (nullable, default 0) - null means no rating yet

Rows are created by the first upsert and rewritten wholesale on every save.
No row is ever deleted by this service.
"""
