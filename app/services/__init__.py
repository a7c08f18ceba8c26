"""Services package — all business logic lives here, never in routers.

Files:
  review.py   — ReviewWorkflow: every status change (onboarding, account, payout)
  stores.py   — persistence protocols used by ReviewWorkflow + SQLAlchemy implementations
  vendor.py   — vendor registration, listing, history
  payout.py   — payout requests and listing

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
