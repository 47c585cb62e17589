"""
Vola Auditor - Source Package

A personal finance auditor: paste a CSV of transactions, get a
burn rate, leakage report and health verdict from Gemini, and keep
a local history of past audits.

DESIGN PRINCIPLES:
1. The model is an opaque black box: prompt + schema in, typed result out
2. Fail visibly, never half-apply a failed audit
3. Every model reply is structurally validated before use
4. History is owned by one store object
"""

__version__ = "1.0.0"
__author__ = "Vola Auditor Team"
