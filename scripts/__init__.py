"""
Operator Scripts
Preflight checks run before a deployment session
"""
