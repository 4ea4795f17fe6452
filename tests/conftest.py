import os

# keep test runs off the filesystem and start with empty tables
os.environ.setdefault("FARMSTORE_LOG_DIR", "")
os.environ.setdefault("FARMSTORE_SEED_ON_STARTUP", "false")
