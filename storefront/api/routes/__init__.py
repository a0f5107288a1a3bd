"""
API Routes Package
"""
from . import admin, auth, health, plans, seller
