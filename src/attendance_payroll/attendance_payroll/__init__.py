"""Attendance Payroll package.

This package is organized by feature modules (attendance, employees, payroll,
reports) with a thin Flask controller layer and service/repository layers.
"""
