"""
Post resource: schemas, SQL, business logic and routes.
"""
