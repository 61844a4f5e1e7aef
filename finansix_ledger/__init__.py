"""Billing-cycle, installment and free-balance ledger engine"""
