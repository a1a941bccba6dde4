"""
Customer and address record management.

Parameterized queries, the customer -> address relationship, and the
interactive workflows an operator uses to view, add, update and remove
records.
"""
