"""Dayflow HRMS backend.

Feature modules (auth, employees, attendance, leaves, payroll, dashboard) each
pair a thin Flask controller with a service and a repository interface; MySQL
implementations of the repositories live next to them.
"""
