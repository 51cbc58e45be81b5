"""
Out-of-band maintenance scripts.

Contents
--------
- create_admin
    Creates or promotes admin accounts and revokes the admin flag.
"""
