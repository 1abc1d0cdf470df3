"""
Repository layer

Each aggregate is stored behind a small abstract interface (base.py) with
two implementations: SQLAlchemy-backed (sql.py) for the web application and
dict-backed (memory.py) for library use and tests.
"""
