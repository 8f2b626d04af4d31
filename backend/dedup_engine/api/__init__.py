"""
Caller-facing contracts: result DTOs, mappers and the error taxonomy.
"""
