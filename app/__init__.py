"""
                Restaurant Ordering API

A small REST backend for a restaurant menu: products, orders,
minimum order amount and product image checks.

Author: Khalil_Bannouri
Version: 1.0.0
License: MIT
"""

__version__ = "1.0.0"
__author__ = "Khalil_Bannouri"
