# Supabase table: project_deployments
# This file documents the expected database schema
# Actual operations are handled by studio.storage

"""
Expected Supabase table structure:
- id: bigint (primary key, generated always as identity)
- project_id: bigint (foreign key to projects.id, not null, on delete cascade)
- deployment_url: text (not null)
- status: text (not null, default: 'pending') - values: pending, building, deployed, failed
- build_logs: text (nullable)
- created_at: timestamptz (not null, default: now())
- updated_at: timestamptz (not null, default: now())
"""
