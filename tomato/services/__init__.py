"""
                        Services Module

Business logic called by the routers:
    - users: registration and login
    - cart: per-user cart on the user record
    - orders: placement, Razorpay order creation and verification
    - payment: gateway capability (Razorpay or unavailable)
"""
