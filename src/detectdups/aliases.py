DESCRIPTION_TEXT = "detectdups — find files with identical content and optionally delete the copies"

CACHE_HELP_TEXT = (
    "SQLite file caching computed hashes between runs (created if missing).\n"
    "Files whose path is already cached are never hashed again.\n"
    "Example: %(prog)s ~/Photos --cache ~/.cache/detectdups.db"
)

DELETE_HELP_TEXT = (
    "Delete duplicates (default: list only).\n"
    "The first file seen with a given content is always kept;\n"
    "read-only duplicates are made writable before deletion."
)

EPILOG_TEXT = """
Examples:
  List duplicates in the Downloads folder (top level only)
  %(prog)s ~/Downloads

  Search several trees recursively, reusing hashes from previous runs
  %(prog)s -r ~/Photos /mnt/backup/Photos --cache ~/.cache/detectdups.db

  Same as above + delete every duplicate found after the first copy
  %(prog)s -r ~/Photos /mnt/backup/Photos --cache ~/.cache/detectdups.db --delete

  Move duplicates to the system trash instead of deleting them
  %(prog)s -r ~/Photos --delete --trash
"""
