"""
Schedule generation for lease accounting
"""
