# =============================================================================
# scripts/setup_cases_table.py
# Setup script for the first-aid cases table in Supabase
# =============================================================================
"""
Run this script to:
1. Print the SQL that creates the first_aid_cases table (paste it into the
   Supabase SQL editor; the anon key cannot run DDL)
2. Check that the configured project is reachable and the table is readable

Usage:
    python scripts/setup_cases_table.py            # check connection + table
    python scripts/setup_cases_table.py --sql      # only print the DDL

Prerequisites:
    - Configure .streamlit/secrets.toml with Supabase credentials, or set
      SUPABASE_URL and SUPABASE_KEY
"""

import sys
from pathlib import Path

# Add project root to path
project_root = Path(__file__).parent.parent
sys.path.insert(0, str(project_root))

from firstaid_core.config import load_settings
from firstaid_core.data.supabase_client import create_supabase_client


CREATE_TABLE_SQL = """
create table if not exists public.{table} (
    id          text primary key default gen_random_uuid()::text,
    data        jsonb not null,
    created_at  timestamptz not null default now()
);

create index if not exists {table}_created_at_idx on public.{table} (created_at);

alter table public.{table} enable row level security;

-- Single-site log: the app key may read and write every row.
create policy "{table} full access" on public.{table}
    for all using (true) with check (true);
"""


def load_secrets_toml() -> dict:
    """Read .streamlit/secrets.toml when the script runs outside Streamlit."""
    secrets_path = project_root / ".streamlit" / "secrets.toml"
    if not secrets_path.exists():
        return {}

    import tomllib

    with open(secrets_path, "rb") as f:
        return tomllib.load(f)


def print_ddl(table_name: str):
    print(f"\n[1/2] SQL for table: {table_name}")
    print("-" * 70)
    print(CREATE_TABLE_SQL.format(table=table_name).strip())
    print("-" * 70)


def verify_table(client, table_name: str) -> bool:
    """Count rows and show a couple of samples."""
    print(f"\n[2/2] Verifying table {table_name}...")

    try:
        response = client.table(table_name).select("id", count="exact").limit(1).execute()
        count = response.count if getattr(response, "count", None) is not None else len(response.data)
        print(f"      Table {table_name} has {count} cases.")

        sample = client.table(table_name).select("id, data").order("created_at", desc=True).limit(3).execute()
        for row in sample.data or []:
            doc = row.get("data") or {}
            print(f"        - {row.get('id')}: {doc.get('dateOfEvent')} {doc.get('personName')} "
                  f"({doc.get('department')})")
        return True
    except Exception as e:
        print(f"ERROR verifying table: {e}")
        return False


def main():
    print("=" * 70)
    print(" FIRST-AID CASE LOG - SUPABASE SETUP SCRIPT")
    print("=" * 70)

    settings = load_settings(secrets=load_secrets_toml())
    print_ddl(settings.cases_table)

    if "--sql" in sys.argv[1:]:
        return

    if not settings.remote_configured:
        print("\nERROR: Missing Supabase credentials.")
        print()
        print("Option 1: Configure .streamlit/secrets.toml:")
        print('  [supabase]')
        print('  url = "https://your-project.supabase.co"')
        print('  key = "your-anon-key"')
        print()
        print("Option 2: Set environment variables:")
        print("  SUPABASE_URL and SUPABASE_KEY")
        sys.exit(1)

    print(f"\nUsing Supabase URL: {settings.supabase_url[:40]}...")
    client = create_supabase_client(settings)
    if client is None:
        print("ERROR: Could not create the Supabase client (see log above).")
        sys.exit(1)

    success = verify_table(client, settings.cases_table)

    print("\n" + "=" * 70)
    if success:
        print(" SETUP COMPLETE! The case log can use the cloud store.")
    else:
        print(" TABLE NOT READY. Run the SQL above in the Supabase SQL editor.")
    print("=" * 70)
    if not success:
        sys.exit(1)


if __name__ == "__main__":
    main()
