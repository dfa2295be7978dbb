"""
Nutrition Service: product CRUD with nutrient lookup and image storage
"""

__version__ = "1.0.0"
