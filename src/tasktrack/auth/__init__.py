"""
Session / authorization subsystem.

Components:
- models.py: Session and LoginResponse records
- credential_store.py: single-slot JSON file holding the persisted Session
- session.py: SessionManager (login/logout/initialize, replay-latest subscriptions)
- authorizer.py: pure bearer-token request decorator
- guard.py: RouteGuard for protected views
"""
