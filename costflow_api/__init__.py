"""
CostFlow REST API: cost standards, variance analysis and reporting for food service.
"""
