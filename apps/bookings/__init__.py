"""Bookings app package.

This app encapsulates the equipment booking engine: the interval and
pricing rules, the availability index, the booking lifecycle and the
store adapters. Requests and acceptances run inside a per-equipment
transaction so no two active bookings of one machine ever overlap.
"""
