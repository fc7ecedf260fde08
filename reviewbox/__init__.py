"""
Review Box API - group-based review and rating service
"""
