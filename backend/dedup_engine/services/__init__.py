"""
Service layer: storage adapters and deduplication services.
"""
