# Supabase table: project_files
# This file documents the expected database schema
# Actual operations are handled by studio.storage

"""
Expected Supabase table structure:
- id: bigint (primary key, generated always as identity)
- project_id: bigint (foreign key to projects.id, not null, on delete cascade)
- path: text (not null, check: length(path) > 0)
- content: text (not null, default: '')
- created_at: timestamptz (not null, default: now())
- updated_at: timestamptz (not null, default: now())

Unique constraint: (project_id, path). Upserts use it as the conflict target,
so created_at and id are only ever written by the insert branch.
Trigger: before update, set updated_at = now() (shared set_updated_at function),
so a freshly inserted row has created_at == updated_at.
"""
