"""
Service layer.

Services hold the business rules of a domain and talk to the record
store, keeping the API handlers free of SQL.
"""
