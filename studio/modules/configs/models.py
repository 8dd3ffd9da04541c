# Supabase table: project_configs
# This file documents the expected database schema
# Actual operations are handled by studio.storage

"""
Expected Supabase table structure:
- id: bigint (primary key, generated always as identity)
- project_id: bigint (foreign key to projects.id, unique, not null, on delete cascade)
- framework: text (not null)
- build_command: text (nullable)
- output_directory: text (nullable)
- environment_variables: jsonb (not null, default: {})
- created_at: timestamptz (not null, default: now())
- updated_at: timestamptz (not null, default: now())

Unique constraint: (project_id). Upserts use it as the conflict target.
Trigger: before update, set updated_at = now() (shared set_updated_at function),
so a freshly inserted row has created_at == updated_at.
"""
