"""
V1 API router aggregator — wires all endpoint modules together.
"""

from fastapi import APIRouter

from attendance_admin.api.v1.endpoints import attendance, auth, employees, health, leaves

api_router = APIRouter()

# Auth (login, refresh, logout, me)
api_router.include_router(auth.router)

# Daily roster: view, edit, bulk, save, export
api_router.include_router(attendance.router)

# Employees and leave records
api_router.include_router(employees.router)
api_router.include_router(leaves.router)

# Backend health
api_router.include_router(health.router)
