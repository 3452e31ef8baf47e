"""
sendBeneficiaries: validate and create Airwallex beneficiaries from CSV files.
"""

__version__ = "0.1.0"
