"""Pydantic schemas package.

Folder intent:
  common.py    — CamelModel base + HealthResponse (all schemas inherit CamelModel)
  vendor.py    — vendor registration DTO + VendorAccountOut record
  payout.py    — payout request DTO + PayoutRequestOut record
  workflow.py  — ReviewAction / AccountStatusAction / PayoutAction + action listings
"""
