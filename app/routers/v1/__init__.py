"""v1 router package — all /api/v1/* endpoints live here.

Files:
  vendors.py  — vendor onboarding: CRUD, lifecycle transitions, audit history

Rule: Routers only handle HTTP (request parsing, response shaping).
      All business logic delegates to app/services/.
"""
