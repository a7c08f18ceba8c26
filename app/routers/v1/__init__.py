"""v1 router package — all /api/v1/* endpoints live here.

Files:
  vendors.py   — vendor registration, lookups, onboarding review, account status
  payouts.py   — payout requests and payout review
  statuses.py  — status registries (labels, colours, allowed actions)

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to app/services/.
"""
