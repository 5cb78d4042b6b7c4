# -*- coding: utf-8 -*-
"""Authentication: OAuth sign-in and session tokens."""
