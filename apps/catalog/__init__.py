"""Catalog app package.

Customers, sellers, destinations and the bookable inventory (flights,
hotels, transport legs). These tables are plain reference data: the sales
app reads them but never changes them.
"""
