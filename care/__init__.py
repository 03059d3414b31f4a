"""Clinic front-desk application.

Staff authentication, the appointment lifecycle with its patient visit
ledger, and the public website content (doctors, blog, reviews and
contact form).
"""
