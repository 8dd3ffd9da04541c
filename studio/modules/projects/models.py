# Supabase table: projects
# This file documents the expected database schema
# Actual operations are handled by studio.storage

"""
Expected Supabase table structure:
- id: bigint (primary key, generated always as identity)
- user_id: uuid (foreign key to user_profiles.id, not null)
- name: text (not null)
- description: text (nullable)
- deployed_url: text (nullable)
- deployment_status: text (nullable) - values: pending, building, deployed, failed
- created_at: timestamptz (not null, default: now())
- updated_at: timestamptz (not null, default: now())

Index: (user_id, created_at desc) backs the per-user listing.
"""
