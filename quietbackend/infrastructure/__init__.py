"""Infrastructure Layer — store implementations, database access, logging.

Invariants:
    - Infrastructure implements core Protocols; core never imports from here
    - Every storage failure surfaces as a TwoFaceError
"""
