"""Tracking bounded context.

Stores users, devices, location events and places, every one of them
partitioned by the tenant group it belongs to.
"""
