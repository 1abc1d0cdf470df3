"""
Data layer: Flask-SQLAlchemy models and the repository ports used by the
business contexts.
"""
