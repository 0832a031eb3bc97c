# External auth provider
# Identity is issued and verified outside this service. We only resolve a bearer
# token to the provider's user payload through supabase.auth.get_user and never
# store anything about the session ourselves.

"""
Fields read from the provider's user payload:
- id - opaque identity string (e.g. "user_2f9..."); the profile key is derived from it
- user_metadata.first_name / firstName
- user_metadata.last_name / lastName
- user_metadata.image_url / avatar_url / picture

Names and image only seed the defaults of a profile that does not exist yet.
"""
