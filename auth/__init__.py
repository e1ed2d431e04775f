"""
auth — User authentication module.

Provides:
  • HMAC-signed access and password-reset tokens
  • Password hashing (bcrypt)
  • ``AuthService``: register / login / reset request / reset completion
  • API routes and the ``get_current_user_id`` FastAPI dependency
"""
