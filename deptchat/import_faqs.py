"""Load FAQ rows from a spreadsheet into the faqs table.

Expected columns: Category, Question, Answer, Keywords (comma separated).
"""

import argparse

import pandas as pd

from deptchat.clients import create_service_client
from deptchat.config import load_settings
from deptchat.faq import FAQ_TABLE


def _cell(row, column):
    value = row.get(column)
    if value is None or pd.isna(value):
        return ""
    return str(value).strip()


def parse_keywords(raw):
    return [k.strip() for k in raw.split(",") if k.strip()]


def row_to_faq(row):
    """Spreadsheet row -> faqs insert payload, or None if the row is unusable"""
    question = _cell(row, "Question")
    answer = _cell(row, "Answer")
    if not question or not answer:
        return None
    return {
        "category": _cell(row, "Category") or "General",
        "question": question,
        "answer": answer,
        "keywords": parse_keywords(_cell(row, "Keywords")),
    }


def import_faqs(df, supabase):
    print("\n" + "=" * 60)
    print("📚 IMPORTING FAQ DATA")
    print("=" * 60)

    df.columns = df.columns.str.strip()
    print(f"✅ Found {len(df)} rows")

    success_count = 0
    error_count = 0

    for index, row in df.iterrows():
        faq = row_to_faq(row)
        if faq is None:
            error_count += 1
            print(f"❌ Skipping row {index + 2}: missing question or answer")
            continue

        try:
            supabase.table(FAQ_TABLE).insert(faq).execute()
            success_count += 1
            print(f"✅ [{success_count}] {faq['question'][:60]}")
        except Exception as e:
            error_count += 1
            print(f"❌ Error on row {index + 2}: {str(e)}")

    print("\n" + "=" * 60)
    print(f"✅ Successfully imported: {success_count} FAQs")
    print(f"❌ Errors: {error_count}")
    print("=" * 60)

    return success_count, error_count


def main(argv=None):
    parser = argparse.ArgumentParser(description="Import department FAQs into Supabase")
    parser.add_argument("path", help="Excel or CSV file with Category, Question, Answer, Keywords columns")
    parser.add_argument("--yes", action="store_true", help="skip the confirmation prompt")
    args = parser.parse_args(argv)

    settings = load_settings()
    if not settings.supabase_url or not (settings.supabase_service_key or settings.supabase_anon_key):
        print("❌ Missing environment variables!")
        print("Make sure .env file has:")
        print("  SUPABASE_URL=...")
        print("  SUPABASE_SERVICE_ROLE_KEY=...")
        return 1

    if args.path.lower().endswith(".csv"):
        df = pd.read_csv(args.path)
    else:
        df = pd.read_excel(args.path)

    if not args.yes:
        confirm = input(f"Import {len(df)} FAQ rows into {settings.supabase_url}? (yes/no): ").lower()
        if confirm != "yes":
            print("❌ Cancelled")
            return 1

    import_faqs(df, create_service_client(settings))
    return 0


if __name__ == "__main__":
    raise SystemExit(main())
