"""
Application services.

- costing: pure Cost & Variance Calculation Engine
- crud: repository and delete policy
- domain: services that read, compute and persist
"""
