"""Mock personal-finance-management backend.

The package hosts the alert rule evaluation engine together with the
persistence layer it reads subjects from and writes notifications to.
"""
