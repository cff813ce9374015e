"""Library Tracker - Core Application Package

This package contains the core application modules including:
- Catalog management logic (library.py)
- Persistence layer (storage.py)
- Data models (book.py)
- Operation results and error kinds (results.py)
- CLI interface (main.py)
"""

__version__ = "1.0.0"
