"""
                Tomato Food Ordering Backend

Registration and login, cart, order placement and Razorpay payment
verification behind a JSON API.
"""

__version__ = "1.0.0"
