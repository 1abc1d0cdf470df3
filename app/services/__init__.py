"""
Services Layer
Helpers shared by the business contexts and the routes that are not
business rules themselves (user-facing notifications).
"""
