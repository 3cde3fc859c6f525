"""CSSD Roster package.

Organized by feature modules (schedules, swaps, shifts, units, users) with a
thin Flask controller layer over service/repository layers.
"""
