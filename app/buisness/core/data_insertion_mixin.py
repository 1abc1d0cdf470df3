"""
Generic data insertion mixin for SQLAlchemy models
Provides from_dict and to_dict methods for automatic data insertion

Models expose snake_case attributes; dictionaries exchanged with callers
(API bodies, webhook payload sources, sample data) use the camelCase field
names of the public record format. Both spellings are accepted on input.
"""

from datetime import datetime
from sqlalchemy import inspect
from app import db
from app.logger import get_logger
from app.utils.timestamps import isoformat

logger = get_logger("purchasing.buisness.core.data_insertion")


def to_camel(key):
    head, *rest = key.split('_')
    return head + ''.join(part.capitalize() for part in rest)


def to_snake(key):
    out = []
    for char in key:
        if char.isupper():
            out.append('_')
            out.append(char.lower())
        else:
            out.append(char)
    return ''.join(out)


class DataInsertionMixin:
    """
    Mixin that provides generic data insertion capabilities for SQLAlchemy models

    This mixin adds:
    - from_dict(): Create model instance from dictionary
    - to_dict(): Convert model instance to dictionary
    - bulk_create_from_dicts(): Create and save multiple instances
    """

    # Columns never serialized by to_dict()
    __hidden_fields__ = ()

    @classmethod
    def normalize_keys(cls, data_dict):
        """Map camelCase keys onto column attribute names, dropping unknown keys."""
        columns = {c.key for c in inspect(cls).columns}
        normalized = {}
        for key, value in (data_dict or {}).items():
            attr = key if key in columns else to_snake(key)
            if attr in columns:
                normalized[attr] = value
        return normalized

    @classmethod
    def from_dict(cls, data_dict, skip_fields=None):
        """
        Create a model instance from a dictionary

        Args:
            data_dict (dict): Dictionary containing model data (either key spelling)
            skip_fields (list, optional): Fields to skip during creation

        Returns:
            Model instance (not saved to database)
        """
        skip_fields = set(skip_fields or [])
        filtered_data = {}
        for key, value in cls.normalize_keys(data_dict).items():
            if key in skip_fields:
                continue
            if key in ('created_at', 'updated_at') and value is None:
                continue
            filtered_data[key] = value

        return cls(**filtered_data)

    def to_dict(self):
        """
        Convert model instance to a dictionary keyed by camelCase field names

        Returns:
            dict: Dictionary representation of the model
        """
        result = {}
        mapper = inspect(self.__class__)

        for column in mapper.columns:
            if column.key in self.__hidden_fields__:
                continue
            value = getattr(self, column.key)
            if isinstance(value, datetime):
                value = isoformat(value)
            result[to_camel(column.key)] = value

        return result

    @classmethod
    def bulk_create_from_dicts(cls, data_list, commit=True):
        """
        Create multiple model instances from list of dictionaries

        Args:
            data_list (list): List of dictionaries containing model data
            commit (bool): Whether to commit the transaction

        Returns:
            list: List of created model instances
        """
        instances = []

        for data_dict in data_list:
            instance = cls.from_dict(data_dict)
            instances.append(instance)
            db.session.add(instance)

        try:
            if commit:
                db.session.commit()
                logger.info(f"Created {len(instances)} {cls.__name__} instances")
            return instances
        except Exception as e:
            db.session.rollback()
            logger.error(f"Error bulk creating {cls.__name__}: {e}")
            raise
