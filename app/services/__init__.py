"""Services package — all business logic lives here, never in routers.

Files:
  vendor.py  — vendor onboarding workflow (lifecycle transitions + audit log)

Rule: routers call services, services call repositories, repositories call the DB.
      No SQLAlchemy queries in routers. No FastAPI imports in services.
"""
