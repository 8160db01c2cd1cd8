# File: skinsage/core/database/base.py

from sqlalchemy.orm import declarative_base

# The shared registry. All feature models (Scan, ScanImage, Job) inherit from this.
Base = declarative_base()
