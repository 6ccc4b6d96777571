"""Pydantic schemas package.

Folder intent:
  common.py  — CamelModel / RequestModel bases + HealthResponse (all schemas inherit CamelModel)
  vendor.py  — vendor request DTOs, public vendor projection, audit log entries
"""
