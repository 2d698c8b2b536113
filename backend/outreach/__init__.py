"""
LinkedIn Outreach Manager backend.
"""
