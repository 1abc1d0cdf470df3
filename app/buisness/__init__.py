"""
Domain layer for the purchasing system.
Contains the business contexts (orders, users, webhooks, inventory) separated
from data persistence concerns.
"""
