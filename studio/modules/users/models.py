# Supabase table: user_profiles
# This file documents the expected database schema
# Actual operations are handled by studio.storage

"""
Expected Supabase table structure:

user_profiles:
- id: uuid (primary key, default: gen_random_uuid())
- username: text (not null)
- email: text (unique, not null)
- plan: text (not null, default: 'free') - values: free, pro, team
- stripe_customer_id: text (nullable)
- created_at: timestamptz (not null, default: now())
- updated_at: timestamptz (not null, default: now())
"""
