"""Face Attendance package.

Organized by feature modules (identities, matching, attendance, reports)
with a thin Flask controller layer over store/ledger/service layers.
"""
